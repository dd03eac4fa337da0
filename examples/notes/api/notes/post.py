import notes_store


async def handler(request):
    data = await request.json()
    if not data.get("title"):
        return {"error": "title is required"}, 400
    return notes_store.create(data["title"], data.get("body", "")), 201
