"""
Pydantic schemas for API request/response models
Games are owned by this service; prediction and reference payloads belong to
the analytics service and are only described here.
"""
from pydantic import BaseModel, model_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


class LenientModel(BaseModel):
    """Base for decoded payloads: a JSON null leaves the field at its default"""

    @model_validator(mode="before")
    @classmethod
    def _null_as_default(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ===== GAME SCHEMAS =====

class Game(LenientModel):
    """A football match held in the in-memory registry"""
    id: str = ""
    name: str = ""
    team1: str = ""
    team2: str = ""
    game_time: Optional[datetime] = None
    league: str = ""
    status: str = ""
    season: int = 0


# ===== PREDICTION SCHEMAS =====

class PredictionRequest(LenientModel):
    """Request body forwarded to the analytics /predict endpoint"""
    season: int = 0
    league: str = ""
    team1: str = ""
    team2: str = ""
    gameDate: str = ""


class JobResponse(LenientModel):
    """Status of a prediction job as reported by the analytics service"""
    status: str = ""
    job_id: str = ""
    message: Optional[str] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response, leaving out empty optional fields."""
        result = {"status": self.status, "job_id": self.job_id}
        if self.message:
            result["message"] = self.message
        if self.result:
            result["result"] = self.result
        if self.error:
            result["error"] = self.error
        return result


# ===== REFERENCE DATA SCHEMAS =====
# Relayed byte-for-byte; used for API documentation only.

class DataResponse(BaseModel):
    """Tabular team / next-game data"""
    status: str
    data: Optional[List[Dict[str, Any]]] = None
    shape: Optional[List[int]] = None
    columns: Optional[List[str]] = None
    message: Optional[str] = None


class LeaguesResponse(BaseModel):
    """Available leagues"""
    status: str
    leagues: Optional[List[str]] = None


class TeamsResponse(BaseModel):
    """Teams for a league"""
    status: str
    league: Optional[str] = None
    teams: Optional[List[str]] = None


# ===== ERROR SCHEMAS =====

class MessageResponse(BaseModel):
    """Error body produced by the gateway itself"""
    message: str
    error: Optional[str] = None
