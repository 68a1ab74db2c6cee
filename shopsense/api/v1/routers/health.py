# shopsense/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Depends, Query

from shopsense.api.deps import catalog_dep, llm_dep
from shopsense.core.config import get_settings

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/health")
async def health(
    deep: bool = Query(False, description="Also ping the LLM (costs one completion)"),
    llm = Depends(llm_dep),
    catalog = Depends(catalog_dep),
):
    """
    Tolerant health check:
    - basic app info and uptime
    - catalog size (in-memory, resets on restart)
    - OpenAI key presence, plus a live model ping when deep=true
    """
    settings = get_settings()
    sha = settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha()
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": sha,
        "uptime_seconds": int(time.time() - START_TIME),
        "catalog_categories": len(catalog),
        "openai_api_key_set": bool(settings.OPENAI_API_KEY),
    }

    if deep:
        checks["llm"] = "ok" if await llm.health_check() else "error"
    else:
        checks["llm"] = "skipped"

    def _is_ok(v):
        return v in ("ok", "skipped") or v is True

    health_keys = ("openai_api_key_set", "llm")
    status = "ok" if all(_is_ok(checks.get(k)) for k in health_keys) else "error"

    return {"status": status, "checks": checks, "timestamp": int(time.time())}
