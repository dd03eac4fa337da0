"""Notes — a JSON API laid out as a handler tree.

    api/
      0-cors.py           CORS headers on every response
      1-timing.py         X-Response-Time header
      get.py              GET  /api          service info
      404.py              JSON not-found body
      error.py            JSON error body
      notes/
        get.py            GET  /api/notes
        post.py           POST /api/notes
        [id]/
          get.py          GET    /api/notes/:id
          delete.py       DELETE /api/notes/:id

Handlers share an in-memory store (``notes_store.py``).

Run:
    cd examples/notes && python app.py
"""

from pathlib import Path

import notes_store

from roost import App, RoostConfig

notes_store.reset()

app = App(RoostConfig(api_dir=Path(__file__).parent / "api", prefix="/api", debug=True))
app.mount()

if __name__ == "__main__":
    app.run()
