"""httpspec - Manage the lifecycle of remote objects over plain HTTP calls."""

from .blueprints import Blueprint as Blueprint
from .context import Context as Context
from .dispatch import DEFAULT_TIMEOUT as DEFAULT_TIMEOUT
from .dispatch import Dispatcher as Dispatcher
from .errors import ContentTypeError as ContentTypeError
from .errors import HttpResourceError as HttpResourceError
from .errors import IdentityMissingError as IdentityMissingError
from .errors import RequestError as RequestError
from .errors import TransportError as TransportError
from .http_resource import HttpResource as HttpResource
from .models import HttpMethod as HttpMethod
from .models import ResourceSpec as ResourceSpec
from .models import ResourceState as ResourceState
from .models import Variant as Variant
from .projects import Project as Project
from .spec import Resource as Resource
from .spec import resource as resource
from .specop import Absent as Absent
from .specop import Ensure as Ensure
from .specop import Present as Present
from .specop import SpecOp as SpecOp
from .state import StateStore as StateStore
from .workspace import Workspace as Workspace
