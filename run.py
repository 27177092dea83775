import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Single worker: per-owner placement locks live in process memory,
    # so a second worker could overbook a rack.
    uvicorn.run(
        "tirestore.main:app",
        host="0.0.0.0",
        port=port,
        workers=1,
    )
