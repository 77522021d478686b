from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_parents: int
    total_coaches: int
    total_kids: int
    sessions_this_week: int
    pending_free_session_requests: int
    pending_reschedule_requests: int
    pending_extra_session_requests: int
