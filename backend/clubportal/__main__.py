import os

import uvicorn

from .main import app

port = int(os.getenv("PORT", 5000))
uvicorn.run(app, host="0.0.0.0", port=port)
