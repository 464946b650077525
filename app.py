"""
GitHub Wrapped (Flask)

What it does:
- Accepts a GitHub username
- Aggregates a year-in-review profile from the GitHub REST + GraphQL APIs
  (GraphQL when GITHUB_TOKEN is set, public events + estimates otherwise)
- Serves it as JSON, as a themed SVG share card and as a scene timeline
  for the animated presentation

Setup:
  pip install -e .

Run:
  export GITHUB_TOKEN="github_pat_..."   # optional: exact contribution counts
  python app.py
  open http://localhost:5000

Endpoints:
  GET /api/github/<username>                       -> JSON stats
  GET /api/github/<username>/card.svg?theme=&layout= -> share card
  GET /api/github/<username>/presentation?frame=    -> scene timeline
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from gitwrapped.config import Settings
from gitwrapped.web import create_app

load_dotenv()

settings = Settings.from_env()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG", "").lower() in ("1", "true"))
