"""Services module"""

from anmeldung.services.admin_service import AdminService, DeletedRegistration
from anmeldung.services.edit_token import derive_token, is_url_safe_token
from anmeldung.services.lifecycle import (
    RegistrationLifecycle,
    RegistrationState,
    SubmitResult,
    is_deadline_passed,
    registration_state,
    signup_deadline_end,
)
from anmeldung.services.notifier import (
    EditLinkNotifier,
    HttpEditLinkNotifier,
    build_edit_link,
    render_edit_link_email,
)
from anmeldung.services.search import filter_registrations
from anmeldung.services.season_service import (
    SeasonProposal,
    propose_next_season,
    validate_season_fields,
)
from anmeldung.services.statistics import (
    ClubCount,
    SeasonStatistics,
    age_category,
    calculate_statistics,
)

__all__ = [
    "AdminService",
    "ClubCount",
    "DeletedRegistration",
    "EditLinkNotifier",
    "HttpEditLinkNotifier",
    "RegistrationLifecycle",
    "RegistrationState",
    "SeasonProposal",
    "SeasonStatistics",
    "SubmitResult",
    "age_category",
    "build_edit_link",
    "calculate_statistics",
    "derive_token",
    "filter_registrations",
    "is_deadline_passed",
    "is_url_safe_token",
    "propose_next_season",
    "registration_state",
    "render_edit_link_email",
    "signup_deadline_end",
    "validate_season_fields",
]
