import logging
from typing import List

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import config, crud, rules, schemas
from .db import engine, get_db, init_db
from .errors import ConflictError, InsufficientHistoryError, InvalidInputError, NotFoundError

config.validate()
config.setup_logging()

logger = logging.getLogger(__name__)

init_db(engine)


app = FastAPI(title="Golf League")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ================================================================================
# ================================ ERROR MAPPING =================================
# ================================================================================

def _error(status_code: int, exc: Exception):
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(InvalidInputError)
def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return _error(400, exc)


@app.exception_handler(InsufficientHistoryError)
def insufficient_history_handler(request: Request, exc: InsufficientHistoryError):
    return _error(400, exc)


@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(ConflictError)
def conflict_handler(request: Request, exc: ConflictError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return _error(409, exc)


def _found(obj, what: str):
    if obj is None:
        raise NotFoundError(f"{what} not found")
    return obj


@app.get("/health")
def health():
    return {"status": "ok"}


#--------------------------------------------------------------------------------
#----------------------------------- LEAGUES ------------------------------------
#--------------------------------------------------------------------------------

@app.post("/api/leagues", response_model=schemas.LeagueOut, status_code=201)
def league_create(data: schemas.LeagueCreate, db: Session = Depends(get_db)):
    return crud.create_league(db, data)


@app.get("/api/leagues", response_model=List[schemas.LeagueOut])
def leagues_list(db: Session = Depends(get_db)):
    return crud.get_leagues(db)


@app.get("/api/leagues/{league_id}/standings", response_model=List[schemas.StandingsRow])
def league_standings(league_id: int, db: Session = Depends(get_db)):
    return crud.compute_standings(db, league_id)


@app.post("/api/leagues/{league_id}/jobs/recalculate-handicaps")
def league_recalculate_handicaps(league_id: int, db: Session = Depends(get_db)):
    return crud.run_handicap_recalculation(db, league_id)


#--------------------------------------------------------------------------------
#----------------------------------- PLAYERS ------------------------------------
#--------------------------------------------------------------------------------

@app.post("/api/players", response_model=schemas.PlayerOut, status_code=201)
def player_create(data: schemas.PlayerCreate, db: Session = Depends(get_db)):
    return crud.create_player(db, data)


@app.get("/api/players", response_model=List[schemas.PlayerOut])
def players_list(active: bool = False, db: Session = Depends(get_db)):
    return crud.get_players(db, only_active=active)


@app.get("/api/players/{player_id}", response_model=schemas.PlayerOut)
def player_detail(player_id: int, db: Session = Depends(get_db)):
    return _found(crud.get_player(db, player_id), f"player {player_id}")


@app.get("/api/leagues/{league_id}/players/{player_id}/handicap", response_model=schemas.HandicapOut)
def player_handicap(league_id: int, player_id: int, db: Session = Depends(get_db)):
    return _found(
        crud.get_current_handicap(db, league_id, player_id),
        f"handicap for player {player_id} in league {league_id}",
    )


@app.get("/api/leagues/{league_id}/players/{player_id}/handicap/history",
         response_model=List[schemas.HandicapOut])
def player_handicap_history(league_id: int, player_id: int, db: Session = Depends(get_db)):
    return crud.get_handicap_history(db, league_id, player_id)


@app.get("/api/leagues/{league_id}/players/{player_id}/absent-handicap")
def player_absent_handicap(league_id: int, player_id: int, db: Session = Depends(get_db)):
    player = _found(crud.get_player(db, player_id), f"player {player_id}")
    posted = crud.effective_handicap_index(db, league_id, player)
    return {
        "player_id": player_id,
        "posted_handicap": posted,
        "absent_handicap": crud.absent_index_for(db, league_id, player, posted),
    }


@app.get("/api/leagues/{league_id}/players/{player_id}/scores", response_model=List[schemas.ScoreOut])
def player_scores(league_id: int, player_id: int, include_absent: bool = False,
                  db: Session = Depends(get_db)):
    return crud.get_player_scores(db, league_id, player_id, include_absent=include_absent)


#--------------------------------------------------------------------------------
#----------------------------------- COURSES ------------------------------------
#--------------------------------------------------------------------------------

@app.post("/api/courses", response_model=schemas.CourseOut, status_code=201)
def course_create(data: schemas.CourseCreate, db: Session = Depends(get_db)):
    return crud.create_course(db, data)


@app.get("/api/courses", response_model=List[schemas.CourseOut])
def courses_list(db: Session = Depends(get_db)):
    return crud.get_courses(db)


@app.get("/api/courses/{course_id}", response_model=schemas.CourseOut)
def course_detail(course_id: int, db: Session = Depends(get_db)):
    return _found(crud.get_course(db, course_id), f"course {course_id}")


#--------------------------------------------------------------------------------
#----------------------------------- MATCHES ------------------------------------
#--------------------------------------------------------------------------------

@app.post("/api/leagues/{league_id}/matches", response_model=schemas.MatchOut, status_code=201)
def match_create(league_id: int, data: schemas.MatchCreate, db: Session = Depends(get_db)):
    return crud.create_match(db, league_id, data)


@app.get("/api/leagues/{league_id}/matches", response_model=List[schemas.MatchOut])
def matches_list(league_id: int, status: str | None = None, db: Session = Depends(get_db)):
    return crud.get_matches(db, league_id, status)


@app.get("/api/matches/{match_id}", response_model=schemas.MatchOut)
def match_detail(match_id: int, db: Session = Depends(get_db)):
    return _found(crud.get_match(db, match_id), f"match {match_id}")


@app.post("/api/matches/{match_id}/scores", response_model=List[schemas.ScoreOut], status_code=201)
def match_scores_submit(match_id: int, data: schemas.MatchScoresSubmission, db: Session = Depends(get_db)):
    return crud.submit_match_scores(db, match_id, data.scores)


@app.get("/api/matches/{match_id}/scores", response_model=List[schemas.ScoreOut])
def match_scores(match_id: int, db: Session = Depends(get_db)):
    _found(crud.get_match(db, match_id), f"match {match_id}")
    return crud.get_match_scores(db, match_id)


#--------------------------------------------------------------------------------
#------------------------------------ RULES -------------------------------------
#--------------------------------------------------------------------------------

@app.post("/api/rules/breakfast-ball")
def rules_breakfast_ball(data: schemas.BreakfastBallCheck):
    return {
        "allowed": rules.breakfast_ball_allowed(data.hole_number),
        "score": rules.breakfast_ball_score(data.hole_number, data.first_shot, data.second_shot, data.used),
    }


@app.get("/api/rules/penalties/{penalty}")
def rules_penalty(penalty: str):
    return {"penalty": penalty, "strokes": rules.penalty_strokes(penalty)}


@app.post("/api/rules/drop")
def rules_drop(data: schemas.DropCheck):
    return {"valid": rules.is_valid_drop(data.penalty, data.closer_to_hole, data.within_two_club_lengths)}


@app.post("/api/rules/lie-improvement")
def rules_lie_improvement(data: schemas.LieImprovementCheck):
    return {"valid": rules.is_valid_lie_improvement(data.improvement_inches, data.obstacle_eliminated)}


@app.post("/api/rules/gimme")
def rules_gimme(data: schemas.GimmeCheck):
    return {
        "gimme": rules.is_gimme(data.distance_feet),
        "must_hole_out": rules.must_hole_out(data.distance_feet),
    }
