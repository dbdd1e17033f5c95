"""Resolution of additional restriction types.

Additional restrictions are configured as a mapping of restriction type
(a class or its dotted import path) to options::

    {"myext.restrictions.TenantRestriction": {"disabled": False}}

Enabled entries are imported and checked when a query builder is created,
so a typo in the configuration fails early instead of at query time.
"""

import importlib
import logging
from typing import Any, List, Mapping, Type, Union

from sqlcomposer.common.exceptions import ErrorCode, configuration_error
from sqlcomposer.query_builder.restriction.base import QueryRestriction


logger = logging.getLogger(__name__)

RestrictionTypeRef = Union[str, Type[QueryRestriction]]


def resolve_restriction_type(reference: RestrictionTypeRef) -> Type[QueryRestriction]:
    """Import and validate one restriction type.

    Args:
        reference: Restriction class or ``"package.module.ClassName"``

    Raises:
        QueryBuilderError: CONFIG_INVALID if the path cannot be imported or
            does not name a QueryRestriction subclass
    """
    if isinstance(reference, str):
        module_name, _, class_name = reference.strip().rpartition(".")
        if not module_name or not class_name:
            raise configuration_error(
                f"Invalid restriction type '{reference}', expected 'package.module.ClassName'",
                config_key=reference,
                error_code=ErrorCode.CONFIG_INVALID,
            )
        try:
            module = importlib.import_module(module_name)
            restriction_type = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise configuration_error(
                f"Restriction type '{reference}' cannot be imported",
                config_key=reference,
                error_code=ErrorCode.CONFIG_INVALID,
                cause=e,
            )
    else:
        restriction_type = reference

    if not isinstance(restriction_type, type) or not issubclass(restriction_type, QueryRestriction):
        raise configuration_error(
            f"Restriction type '{reference}' does not implement QueryRestriction",
            config_key=str(reference),
            error_code=ErrorCode.CONFIG_INVALID,
        )
    return restriction_type


def _is_disabled(options: Any) -> bool:
    if options is None:
        return False
    if isinstance(options, Mapping):
        return bool(options.get("disabled", False))
    return bool(getattr(options, "disabled", False))


def resolve_additional_restrictions(
    restrictions: Mapping[RestrictionTypeRef, Any],
) -> List[Type[QueryRestriction]]:
    """Resolve the enabled entries of an additional restriction mapping.

    Disabled entries are skipped without being imported.

    Returns:
        Restriction classes in configuration order
    """
    resolved = []
    for reference, options in restrictions.items():
        if _is_disabled(options):
            logger.debug("Skipping disabled additional restriction %s", reference)
            continue
        resolved.append(resolve_restriction_type(reference))
    return resolved
