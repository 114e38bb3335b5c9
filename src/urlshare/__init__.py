__version__ = "0.1"

from .errors import ConfigurationError, InvalidParameterError, InvalidUrlError, UrlShareError
from .merge import UpdatedParameters, update_url_parameters
from .nurl import NURL, parse_iri, parse_uri, parse_url
from .params import ABSENT, DEFAULT_FORMAT, Absent, ParameterFormat, decode_parameters, encode_parameters, strip_component_delimiter
from .share import ShareRequest, update_url_for_sharing, update_url_for_sharing_request
