"""Import every model module so Base.metadata and the mapper registry are complete.

Relationships are declared by class name across services, so anything that
queries the database outside the app (alembic, scripts, tests) calls
load_all_models() first.
"""


def load_all_models() -> None:
    from services.audit_service import models as _audit  # noqa: F401
    from services.banners_service import models as _banners  # noqa: F401
    from services.codes_service import models as _codes  # noqa: F401
    from services.crm_service import models as _crm  # noqa: F401
    from services.invoices_service import models as _invoices  # noqa: F401
    from services.kids_service import models as _kids  # noqa: F401
    from services.locations_service import models as _locations  # noqa: F401
    from services.quizzes_service import models as _quizzes  # noqa: F401
    from services.reports_service import models as _reports  # noqa: F401
    from services.requests_service import models as _requests  # noqa: F401
    from services.resources_service import models as _resources  # noqa: F401
    from services.sessions_service import models as _sessions  # noqa: F401
    from services.users_service import models as _users  # noqa: F401
