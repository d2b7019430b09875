from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Leagues / players
# ---------------------------------------------------------------------------

class LeagueCreate(BaseModel):
    name: str


class LeagueOut(ORMModel):
    id: int
    name: str
    created_at: Optional[datetime] = None


class PlayerCreate(BaseModel):
    name: str
    email: Optional[str] = None
    active: bool = True
    provisional_handicap: float = 0.0


class PlayerOut(ORMModel):
    id: int
    name: str
    email: Optional[str] = None
    active: bool
    provisional_handicap: float


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------

class HoleCreate(BaseModel):
    number: int
    par: int
    stroke_index: int


class HoleOut(HoleCreate, ORMModel):
    pass


class CourseCreate(BaseModel):
    name: str
    par: int = 36
    course_rating: float
    slope_rating: int = 113
    holes: List[HoleCreate]


class CourseOut(ORMModel):
    id: int
    name: str
    par: int
    course_rating: float
    slope_rating: int
    holes: List[HoleOut]


# ---------------------------------------------------------------------------
# Handicaps
# ---------------------------------------------------------------------------

class HandicapOut(ORMModel):
    player_id: int
    league_id: int
    league_handicap_index: float
    updated_at: datetime


# ---------------------------------------------------------------------------
# Matches / scores
# ---------------------------------------------------------------------------

class MatchCreate(BaseModel):
    course_id: int
    player_a_id: int
    player_b_id: int
    match_date: date


class MatchOut(ORMModel):
    id: int
    league_id: int
    course_id: int
    player_a_id: int
    player_b_id: int
    match_date: date
    status: str
    player_a_points: Optional[int] = None
    player_b_points: Optional[int] = None


class ScoreSubmission(BaseModel):
    player_id: int
    hole_scores: List[int] = []
    player_absent: bool = False


class MatchScoresSubmission(BaseModel):
    scores: List[ScoreSubmission]


class ScoreOut(ORMModel):
    id: int
    match_id: int
    player_id: int
    course_id: int
    date: date
    hole_scores: List[int]
    hole_adjusted_gross_scores: List[int]
    match_net_hole_scores: List[int]
    match_strokes: List[int]
    gross_score: int
    net_score: int
    match_net_score: int
    adjusted_gross: int
    handicap_differential: float
    handicap_index: float
    course_handicap: int
    playing_handicap: int
    strokes_received: int
    player_absent: bool


class StandingsRow(BaseModel):
    player_id: int
    player_name: str
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    matches_tied: int = 0
    total_points: int = 0


# ---------------------------------------------------------------------------
# Rules checks (score entry)
# ---------------------------------------------------------------------------

class BreakfastBallCheck(BaseModel):
    hole_number: int
    first_shot: int
    second_shot: int
    used: bool = False


class DropCheck(BaseModel):
    penalty: str
    closer_to_hole: bool
    within_two_club_lengths: bool = False


class LieImprovementCheck(BaseModel):
    improvement_inches: float
    obstacle_eliminated: bool = False


class GimmeCheck(BaseModel):
    distance_feet: float
