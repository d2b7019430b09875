import logging
from collections import defaultdict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import config, golf_calc, match_calc, models, schemas
from .errors import ConflictError, GolfLeagueError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

SCHEDULED = "scheduled"
COMPLETED = "completed"


def _require(obj, what: str):
    if obj is None:
        raise NotFoundError(f"{what} not found")
    return obj


#---------------------------------------------------------------------------------
# ---------------------------------- Leagues -------------------------------------
# --------------------------------------------------------------------------------

def get_leagues(db: Session):
    return db.query(models.League).order_by(models.League.created_at.desc()).all()


def get_league(db: Session, league_id: int):
    return db.query(models.League).filter(models.League.id == league_id).first()


def create_league(db: Session, data: schemas.LeagueCreate):
    if db.query(models.League).filter(models.League.name == data.name).first():
        raise ConflictError(f"league {data.name!r} already exists")
    league = models.League(name=data.name)
    db.add(league)
    db.commit()
    db.refresh(league)
    return league


#---------------------------------------------------------------------------------
# ---------------------------------- Players -------------------------------------
# --------------------------------------------------------------------------------

def get_players(db: Session, only_active: bool = False):
    q = db.query(models.Player)
    if only_active:
        q = q.filter(models.Player.active == True)
    return q.order_by(models.Player.name).all()


def get_player(db: Session, player_id: int):
    return db.query(models.Player).filter(models.Player.id == player_id).first()


def create_player(db: Session, data: schemas.PlayerCreate):
    p = models.Player(**data.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


#---------------------------------------------------------------------------------
# ------------------------------------ Course ------------------------------------
# --------------------------------------------------------------------------------

def get_courses(db: Session):
    return db.query(models.Course).order_by(models.Course.name).all()


def get_course(db: Session, course_id: int):
    return db.query(models.Course).filter(models.Course.id == course_id).first()


def course_snapshot(course) -> golf_calc.Course:
    """Immutable engine view of a course (ORM row or CourseCreate), holes in play order."""
    holes = sorted(course.holes, key=lambda h: h.number)
    return golf_calc.Course(
        par=course.par,
        course_rating=course.course_rating,
        slope_rating=course.slope_rating,
        holes=tuple(golf_calc.Hole(par=h.par, stroke_index=h.stroke_index) for h in holes),
    )


def create_course(db: Session, data: schemas.CourseCreate):
    numbers = sorted(h.number for h in data.holes)
    if numbers != list(range(1, len(data.holes) + 1)):
        raise InvalidInputError(f"hole numbers must run 1..{len(data.holes)}, got {numbers}")
    golf_calc.validate_course(course_snapshot(data))

    c = models.Course(
        name=data.name,
        par=data.par,
        course_rating=data.course_rating,
        slope_rating=data.slope_rating,
    )
    for h in data.holes:
        c.holes.append(models.Hole(**h.model_dump()))

    db.add(c)
    db.commit()
    db.refresh(c)
    return c


#---------------------------------------------------------------------------------
# ---------------------------------- Handicaps -----------------------------------
# --------------------------------------------------------------------------------

def get_current_handicap(db: Session, league_id: int, player_id: int):
    return (
        db.query(models.HandicapRecord)
        .filter(
            models.HandicapRecord.league_id == league_id,
            models.HandicapRecord.player_id == player_id,
        )
        .order_by(models.HandicapRecord.updated_at.desc(), models.HandicapRecord.id.desc())
        .first()
    )


def get_handicap_history(db: Session, league_id: int, player_id: int):
    return (
        db.query(models.HandicapRecord)
        .filter(
            models.HandicapRecord.league_id == league_id,
            models.HandicapRecord.player_id == player_id,
        )
        .order_by(models.HandicapRecord.updated_at.desc(), models.HandicapRecord.id.desc())
        .all()
    )


def effective_handicap_index(db: Session, league_id: int, player: models.Player) -> float:
    # no rounds posted yet: committee provisional handicap
    record = get_current_handicap(db, league_id, player.id)
    if record is not None:
        return record.league_handicap_index
    return player.provisional_handicap


def recalculate_player_handicap(db: Session, league_id: int, player: models.Player) -> models.HandicapRecord:
    """
    Appends a new HandicapRecord from the player's last rounds in the league.
    Does not commit: callers decide the transaction boundary.
    """
    rounds = get_player_scores(db, league_id, player.id, limit=config.SCORES_CONSIDERED)
    differentials = [
        golf_calc.Differential(value=s.handicap_differential, timestamp=s.date)
        for s in rounds
    ]
    index = golf_calc.league_handicap(player.provisional_handicap, differentials)

    record = models.HandicapRecord(
        player_id=player.id,
        league_id=league_id,
        league_handicap_index=index,
    )
    db.add(record)
    db.flush()

    logger.info(
        f"Handicap for player {player.name} ({player.id}) in league {league_id}: "
        f"{len(differentials)} rounds -> index {index}"
    )
    return record


def run_handicap_recalculation(db: Session, league_id: int) -> dict:
    _require(get_league(db, league_id), f"league {league_id}")

    players = get_players(db, only_active=True)
    logger.info(f"Recalculating handicaps for {len(players)} active players in league {league_id}")

    ok = errors = 0
    for p in players:
        try:
            recalculate_player_handicap(db, league_id, p)
            ok += 1
        except GolfLeagueError as e:
            logger.error(f"Failed to recalculate handicap for player {p.name} ({p.id}): {e}")
            errors += 1

    db.commit()
    logger.info(f"Handicap recalculation done: {ok} updated, {errors} errors")
    return {"updated": ok, "errors": errors}


#---------------------------------------------------------------------------------
# ------------------------------------ Scores ------------------------------------
# --------------------------------------------------------------------------------

def get_player_scores(db: Session, league_id: int, player_id: int, limit: int | None = None,
                      include_absent: bool = False):
    """Round history, most recent first. Absences are not handicap rounds."""
    q = db.query(models.Score).filter(
        models.Score.league_id == league_id,
        models.Score.player_id == player_id,
    )
    if not include_absent:
        q = q.filter(models.Score.player_absent == False)
    q = q.order_by(models.Score.date.desc(), models.Score.id.desc())
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def get_match_scores(db: Session, match_id: int):
    return (
        db.query(models.Score)
        .filter(models.Score.match_id == match_id)
        .order_by(models.Score.id)
        .all()
    )


def absent_index_for(db: Session, league_id: int, player: models.Player, posted: float) -> float:
    recent = get_player_scores(db, league_id, player.id, limit=config.SCORES_CONSIDERED)
    lookup = {}
    for s in recent:
        if s.course_id not in lookup:
            lookup[s.course_id] = course_snapshot(s.course)
    played = [match_calc.PlayedRound(course_id=s.course_id, adjusted_gross=s.adjusted_gross) for s in recent]
    return match_calc.absent_handicap(posted, played, lookup)


def _round_inputs(db: Session, match: models.Match, player: models.Player,
                  course: golf_calc.Course, submission: schemas.ScoreSubmission) -> dict:
    """Index, handicaps and gross card for one player before match strokes are known."""
    index = effective_handicap_index(db, match.league_id, player)
    if submission.player_absent:
        index = absent_index_for(db, match.league_id, player, index)

    ch, ph = golf_calc.course_and_playing_handicap(index, course)

    if submission.player_absent:
        gross = match_calc.absent_player_hole_scores(ph, course.holes)
        adjusted = list(gross)
    else:
        gross = list(submission.hole_scores)
        golf_calc.validate_hole_scores(gross)
        played = len(get_player_scores(db, match.league_id, player.id))
        adjusted = golf_calc.adjusted_hole_scores(
            gross, course.holes, ph, established=golf_calc.is_established(played)
        )

    return {
        "player": player,
        "absent": submission.player_absent,
        "index": index,
        "course_handicap": ch,
        "playing_handicap": ph,
        "gross": gross,
        "adjusted": adjusted,
    }


def _build_score(match: models.Match, course: golf_calc.Course, r: dict, strokes: list[int]) -> models.Score:
    gross_total = sum(r["gross"])
    adjusted_total = sum(r["adjusted"])
    net_holes = match_calc.net_hole_scores(r["gross"], strokes)

    return models.Score(
        match_id=match.id,
        player_id=r["player"].id,
        league_id=match.league_id,
        course_id=match.course_id,
        date=match.match_date,
        hole_scores=r["gross"],
        hole_adjusted_gross_scores=r["adjusted"],
        match_net_hole_scores=net_holes,
        match_strokes=strokes,
        gross_score=gross_total,
        net_score=gross_total - r["playing_handicap"],
        match_net_score=sum(net_holes),
        adjusted_gross=adjusted_total,
        handicap_differential=golf_calc.score_differential(
            adjusted_total, course.course_rating, course.slope_rating
        ),
        handicap_index=r["index"],
        course_handicap=int(golf_calc.round_half_up(r["course_handicap"])),
        playing_handicap=r["playing_handicap"],
        strokes_received=r["playing_handicap"],
        player_absent=r["absent"],
    )


def submit_match_scores(db: Session, match_id: int, submissions: list[schemas.ScoreSubmission]):
    """
    Posts both cards of a match in one transaction:
    handicaps -> adjusted gross -> differential -> match strokes -> Score rows
    -> handicap recalculation (players who played) -> match points.
    Nothing is written if any step fails.
    """
    match = _require(get_match(db, match_id), f"match {match_id}")
    if match.status == COMPLETED:
        raise ConflictError(f"match {match_id} is already completed")
    if get_match_scores(db, match_id):
        raise ConflictError(f"scores for match {match_id} were already posted")

    by_player = {s.player_id: s for s in submissions}
    expected = {match.player_a_id, match.player_b_id}
    if len(submissions) != 2 or set(by_player) != expected:
        raise InvalidInputError(
            f"match {match_id} needs exactly one card for each of players {sorted(expected)}"
        )

    course = course_snapshot(match.course)

    try:
        ra = _round_inputs(db, match, match.player_a, course, by_player[match.player_a_id])
        rb = _round_inputs(db, match, match.player_b, course, by_player[match.player_b_id])

        strokes = match_calc.assign_strokes(ra["playing_handicap"], rb["playing_handicap"], course.holes)
        score_a = _build_score(match, course, ra, strokes.a)
        score_b = _build_score(match, course, rb, strokes.b)
        db.add_all([score_a, score_b])
        db.flush()

        for r in (ra, rb):
            if not r["absent"]:
                recalculate_player_handicap(db, match.league_id, r["player"])

        _complete_match(match, score_a, score_b)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"scores for match {match_id} were already posted") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(score_a)
    db.refresh(score_b)
    for s in (score_a, score_b):
        logger.info(
            f"Posted score for player {s.player_id} in match {match_id}: gross={s.gross_score}, "
            f"adjusted={s.adjusted_gross}, playing handicap={s.playing_handicap}, "
            f"differential={s.handicap_differential:.1f}, absent={s.player_absent}"
        )
    return [score_a, score_b]


#---------------------------------------------------------------------------------
# ------------------------------------ Matches -----------------------------------
# --------------------------------------------------------------------------------

def get_match(db: Session, match_id: int):
    return db.query(models.Match).filter(models.Match.id == match_id).first()


def get_matches(db: Session, league_id: int, status: str | None = None):
    q = db.query(models.Match).filter(models.Match.league_id == league_id)
    if status:
        q = q.filter(models.Match.status == status)
    return q.order_by(models.Match.match_date.asc(), models.Match.id.asc()).all()


def create_match(db: Session, league_id: int, data: schemas.MatchCreate):
    _require(get_league(db, league_id), f"league {league_id}")
    _require(get_course(db, data.course_id), f"course {data.course_id}")
    _require(get_player(db, data.player_a_id), f"player {data.player_a_id}")
    _require(get_player(db, data.player_b_id), f"player {data.player_b_id}")
    if data.player_a_id == data.player_b_id:
        raise InvalidInputError("a player cannot be matched against themselves")

    m = models.Match(league_id=league_id, status=SCHEDULED, **data.model_dump())
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


def _complete_match(match: models.Match, score_a: models.Score, score_b: models.Score):
    if match.status == COMPLETED:
        raise ConflictError(f"match {match.id} is already completed")

    points_a, points_b = match_calc.match_points(
        score_a.match_net_hole_scores, score_b.match_net_hole_scores
    )
    match.player_a_points = points_a
    match.player_b_points = points_b
    match.status = COMPLETED

    logger.info(
        f"Match {match.id} completed: player A ({match.player_a_id}, playing handicap "
        f"{score_a.playing_handicap}) = {points_a} points, player B ({match.player_b_id}, "
        f"playing handicap {score_b.playing_handicap}) = {points_b} points"
    )


#---------------------------------------------------------------------------------
# ----------------------------------- Standings ----------------------------------
# --------------------------------------------------------------------------------

def compute_standings(db: Session, league_id: int) -> list[schemas.StandingsRow]:
    _require(get_league(db, league_id), f"league {league_id}")

    rows = {}
    stats = defaultdict(lambda: {"played": 0, "won": 0, "lost": 0, "tied": 0, "points": 0})

    for m in get_matches(db, league_id):
        for player in (m.player_a, m.player_b):
            rows[player.id] = player
        if m.status != COMPLETED:
            continue

        for pid, mine, theirs in (
            (m.player_a_id, m.player_a_points, m.player_b_points),
            (m.player_b_id, m.player_b_points, m.player_a_points),
        ):
            s = stats[pid]
            s["played"] += 1
            s["points"] += mine
            if mine > theirs:
                s["won"] += 1
            elif mine < theirs:
                s["lost"] += 1
            else:
                s["tied"] += 1

    table = [
        schemas.StandingsRow(
            player_id=pid,
            player_name=player.name,
            matches_played=stats[pid]["played"],
            matches_won=stats[pid]["won"],
            matches_lost=stats[pid]["lost"],
            matches_tied=stats[pid]["tied"],
            total_points=stats[pid]["points"],
        )
        for pid, player in rows.items()
    ]
    return sorted(table, key=lambda row: (-row.total_points, -row.matches_won, row.player_name))
