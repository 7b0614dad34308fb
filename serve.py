"""habitkin - Simple launcher."""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "habitkin.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
        reload_excludes=["__pycache__/*", "data/*", "*.json"],
    )
