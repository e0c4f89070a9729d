# Root-level entrypoint for platforms that auto-detect an ASGI app.
# Delegates to asset_triage.main.
from asset_triage.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("asset_triage.main:app", host="0.0.0.0", port=8000)
