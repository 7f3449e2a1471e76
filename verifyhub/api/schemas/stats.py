from pydantic import BaseModel, Field


class ServerCountResponse(BaseModel):
    server_id: str
    count: int


class VerificationStatsResponse(BaseModel):
    total_users: int
    recent_verifications: int
    unique_servers: int
    server_breakdown: list[ServerCountResponse] = Field(default_factory=list)
