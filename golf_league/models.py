from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .db import Base


class League(Base):
    __tablename__ = "leagues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    matches = relationship("Match", back_populates="league")


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    active = Column(Boolean, default=True)

    # committee-assigned starting index, used until the first round is posted
    provisional_handicap = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)

    scores = relationship("Score", back_populates="player")
    handicaps = relationship("HandicapRecord", back_populates="player")


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    par = Column(Integer, nullable=False, default=36)
    course_rating = Column(Float, nullable=False)
    slope_rating = Column(Integer, nullable=False, default=113)

    holes = relationship(
        "Hole",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Hole.number",
    )


class Hole(Base):
    __tablename__ = "holes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)

    number = Column(Integer, nullable=False)          # 1..9
    par = Column(Integer, nullable=False)             # 3/4/5
    stroke_index = Column(Integer, nullable=False)    # 1 = hardest .. 9

    course = relationship("Course", back_populates="holes")


class HandicapRecord(Base):
    """One row per recalculation; the newest row is the player's current index."""
    __tablename__ = "handicap_records"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False, index=True)
    league_handicap_index = Column(Float, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    player = relationship("Player", back_populates="handicaps")


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    player_a_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    player_b_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    match_date = Column(Date, nullable=False)

    status = Column(String, nullable=False, default="scheduled")  # scheduled/completed
    player_a_points = Column(Integer, nullable=True)
    player_b_points = Column(Integer, nullable=True)

    league = relationship("League", back_populates="matches")
    course = relationship("Course")
    player_a = relationship("Player", foreign_keys=[player_a_id])
    player_b = relationship("Player", foreign_keys=[player_b_id])
    scores = relationship("Score", back_populates="match")


class Score(Base):
    """A player's card for one match; doubles as their handicap round."""
    __tablename__ = "scores"
    __table_args__ = (UniqueConstraint("match_id", "player_id", name="uq_score_match_player"),)

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    hole_scores = Column(JSON, nullable=False)                  # gross
    hole_adjusted_gross_scores = Column(JSON, nullable=False)   # net double bogey / par+5
    match_net_hole_scores = Column(JSON, nullable=False)        # gross - match strokes
    match_strokes = Column(JSON, nullable=False)

    gross_score = Column(Integer, nullable=False)
    net_score = Column(Integer, nullable=False)          # gross - playing handicap
    match_net_score = Column(Integer, nullable=False)
    adjusted_gross = Column(Integer, nullable=False)
    handicap_differential = Column(Float, nullable=False)

    # handicap in effect for this round
    handicap_index = Column(Float, nullable=False)
    course_handicap = Column(Integer, nullable=False)
    playing_handicap = Column(Integer, nullable=False)
    strokes_received = Column(Integer, nullable=False)

    player_absent = Column(Boolean, nullable=False, default=False)

    match = relationship("Match", back_populates="scores")
    player = relationship("Player", back_populates="scores")
    course = relationship("Course")
