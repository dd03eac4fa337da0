def handler():
    return {"service": "notes", "endpoints": ["/api/notes", "/api/notes/:id"]}
