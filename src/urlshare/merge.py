"""urlshare.merge
Merging new parameters into a URL's search and hash parameters.
"""

import logging

from types import MappingProxyType
from typing import Mapping, NamedTuple

from urlshare.params import ParameterValue, Parameters

logger = logging.getLogger(__name__)


class UpdatedParameters(NamedTuple):
    search_parameters: Mapping[str, ParameterValue]
    hash_parameters: Mapping[str, ParameterValue]


def update_url_parameters(
    new_parameters: Parameters,
    should_apply_new_parameters_to_hash_component: bool,
    hash_parameters: Parameters,
    search_parameters: Parameters,
) -> UpdatedParameters:
    """Writes new_parameters into the hash parameters (or the search parameters), and removes any parameter of the
    other component whose key is among the new ones.

    Keys already present in the target keep their position and take the new value. Other keys are appended in the
    order of new_parameters. None of the arguments are modified.
    """
    target_parameters: Parameters = hash_parameters if should_apply_new_parameters_to_hash_component else search_parameters
    opposing_parameters: Parameters = search_parameters if should_apply_new_parameters_to_hash_component else hash_parameters

    conflicting_keys: list[str] = [key for key in opposing_parameters if key in new_parameters]
    if conflicting_keys:
        logger.debug(
            "removing %s from the %s component",
            conflicting_keys,
            "search" if should_apply_new_parameters_to_hash_component else "hash",
        )

    updated_opposing_parameters: dict[str, ParameterValue] = {
        key: value for key, value in opposing_parameters.items() if key not in new_parameters
    }

    updated_target_parameters: dict[str, ParameterValue] = dict(target_parameters)
    updated_target_parameters.update(new_parameters)

    if should_apply_new_parameters_to_hash_component:
        return UpdatedParameters(
            search_parameters=MappingProxyType(updated_opposing_parameters),
            hash_parameters=MappingProxyType(updated_target_parameters),
        )
    return UpdatedParameters(
        search_parameters=MappingProxyType(updated_target_parameters),
        hash_parameters=MappingProxyType(updated_opposing_parameters),
    )
