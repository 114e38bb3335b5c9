"""urlshare.share
Rewriting a URL's parameters before it is shared.
"""

import dataclasses
import logging

from typing import Self

from urlshare.merge import UpdatedParameters, update_url_parameters
from urlshare.nurl import NURL, parse_url
from urlshare.params import (
    DEFAULT_FORMAT,
    ParameterFormat,
    Parameters,
    decode_parameters,
    encode_parameters,
    strip_component_delimiter,
)

logger = logging.getLogger(__name__)


def update_url_for_sharing(
    url_to_update: str,
    new_parameters: Parameters,
    should_apply_new_parameters_to_hash_component: bool = False,
    fmt: ParameterFormat = DEFAULT_FORMAT,
) -> str:
    """Returns url_to_update with new_parameters written into its query, or into its fragment when
    should_apply_new_parameters_to_hash_component is set. A new key is removed from the other component.

    e.g. update_url_for_sharing("https://domain.tld/?a=1#b=2", {"b": "3"}) == "https://domain.tld/?a=1&b=3"

    Existing parameters are decoded and re-encoded, so every reserved character comes out percent-encoded.
    Scheme, authority and path are kept. Raises InvalidUrlError if url_to_update is not an absolute URL, and
    InvalidParameterError if its query or fragment holds escapes that do not decode under fmt.
    """
    url: NURL = parse_url(url_to_update)

    hash_parameters = decode_parameters(strip_component_delimiter(url.hash), fmt)
    search_parameters = decode_parameters(strip_component_delimiter(url.search), fmt)

    updated: UpdatedParameters = update_url_parameters(
        new_parameters,
        should_apply_new_parameters_to_hash_component,
        hash_parameters,
        search_parameters,
    )

    updated_hash_parameter_string: str = encode_parameters(updated.hash_parameters, fmt)
    updated_search_parameter_string: str = encode_parameters(updated.search_parameters, fmt)

    # An empty component is dropped along with its delimiter.
    result: str = url.replace(
        raw_query=updated_search_parameter_string or None,
        raw_fragment=updated_hash_parameter_string or None,
    ).serialize()

    logger.debug("updated %r to %r", url_to_update, result)
    return result


@dataclasses.dataclass(frozen=True)
class ShareRequest:
    """What a front end collects from the user: the URL, the parameters to write, and where to write them."""

    url_to_update: str
    new_parameters: Parameters
    should_apply_new_parameters_to_hash_component: bool = False

    def apply(self: Self, fmt: ParameterFormat = DEFAULT_FORMAT) -> str:
        return update_url_for_sharing(
            self.url_to_update,
            self.new_parameters,
            self.should_apply_new_parameters_to_hash_component,
            fmt,
        )


def update_url_for_sharing_request(request: ShareRequest, fmt: ParameterFormat = DEFAULT_FORMAT) -> str:
    return request.apply(fmt)
