from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fragdash import __version__
from fragdash.bracket import BracketCycleError, parse_bracket_payload
from fragdash.config import settings
from fragdash.events.series import annotate_tournaments, group_by_series, summarize_series
from fragdash.stats.aggregate import build_stats_view, compute_player_totals
from fragdash.stats.faceit import normalize_faceit_stats
from fragdash.stats.grid import normalize_grid_stats
from fragdash.stats.models import NormalizedMatchStats
from fragdash.stats.pandascore import normalize_pandascore_stats

app = FastAPI(title="Fragdash")

Payload = Dict[str, Any]


class BracketRequest(BaseModel):
    matches: List[Payload] = Field(default_factory=list, description="PandaScore bracket matches")


class FaceitStatsRequest(BaseModel):
    stats: Optional[Payload] = None
    team1_name: str = ""
    team2_name: str = ""


class GridStatsRequest(BaseModel):
    series_state: Optional[Payload] = None
    team1_image_url: Optional[str] = None
    team2_image_url: Optional[str] = None


class PandaScoreStatsRequest(BaseModel):
    player_stats: List[Payload] = Field(default_factory=list)
    games: List[Payload] = Field(default_factory=list)
    team1_name: str = ""
    team2_name: str = ""
    team1_id: int
    team2_id: int
    team1_image_url: Optional[str] = None
    team2_image_url: Optional[str] = None
    player_names: Dict[int, str] = Field(default_factory=dict)


class StatsViewRequest(BaseModel):
    stats: Payload = Field(description="A normalized match stats object")
    map: Union[int, Literal["overall"]] = Field("overall", description="'overall' or a 0-based map index")
    side: Literal["both", "ct", "t"] = "both"


class PlayerTotalsRequest(BaseModel):
    series_states: List[Payload] = Field(default_factory=list, description="Grid.gg seriesState objects")
    player_name: str


class EventGroupRequest(BaseModel):
    tournaments: List[Payload] = Field(default_factory=list)
    status: Optional[Literal["ongoing", "upcoming", "completed"]] = None
    now: Optional[datetime] = None
    is_na: Optional[bool] = None


class SeriesSummaryRequest(BaseModel):
    series: List[Payload] = Field(default_factory=list)
    now: Optional[datetime] = None
    min_year: Optional[int] = None


def _now(value: Optional[datetime]) -> datetime:
    return value or datetime.now(timezone.utc)


def _stats_response(stats: Optional[NormalizedMatchStats]) -> Optional[Payload]:
    return stats.to_dict() if stats else None


@app.exception_handler(BracketCycleError)
async def bracket_cycle_handler(request: Request, exc: BracketCycleError):
    """Reject brackets whose previous-match links loop back on themselves."""
    return JSONResponse(status_code=422, content={"detail": str(exc), "match_ids": exc.match_ids})


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.post("/api/bracket")
async def api_bracket(body: BracketRequest):
    """
    Reconstruct upper/lower bracket rounds and the grand final.

    Returns null for an empty match list.
    """
    bracket = parse_bracket_payload(body.matches)
    return bracket.to_dict() if bracket else None


@app.post("/api/stats/faceit")
async def api_stats_faceit(body: FaceitStatsRequest):
    return _stats_response(normalize_faceit_stats(body.stats, body.team1_name, body.team2_name))


@app.post("/api/stats/grid")
async def api_stats_grid(body: GridStatsRequest):
    return _stats_response(
        normalize_grid_stats(body.series_state, body.team1_image_url, body.team2_image_url)
    )


@app.post("/api/stats/pandascore")
async def api_stats_pandascore(body: PandaScoreStatsRequest):
    return _stats_response(
        normalize_pandascore_stats(
            body.player_stats,
            body.games,
            body.team1_name,
            body.team2_name,
            body.team1_id,
            body.team2_id,
            team1_image_url=body.team1_image_url,
            team2_image_url=body.team2_image_url,
            player_names=body.player_names,
        )
    )


@app.post("/api/stats/view")
async def api_stats_view(body: StatsViewRequest):
    """Rows for one tab of the match stats table, sorted for display."""
    stats = NormalizedMatchStats.from_dict(body.stats)
    return build_stats_view(stats, body.map, body.side).to_dict()


@app.post("/api/players/totals")
async def api_player_totals(body: PlayerTotalsRequest):
    totals = compute_player_totals(body.series_states, body.player_name)
    return totals.to_dict() if totals else None


@app.post("/api/events/group")
async def api_events_group(body: EventGroupRequest):
    """
    Annotate tournaments and fold them into one event per series.

    When no status is given it is computed against ``now`` (default: the
    current time).
    """
    now = None if body.status else _now(body.now)
    tournaments = annotate_tournaments(body.tournaments, status=body.status, now=now, is_na=body.is_na)
    return [event.to_dict() for event in group_by_series(tournaments)]


@app.post("/api/events/series")
async def api_events_series(body: SeriesSummaryRequest):
    summaries = summarize_series(body.series, _now(body.now), min_year=body.min_year)
    return [summary.to_dict() for summary in summaries]


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fragdash.web.main:app", host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
