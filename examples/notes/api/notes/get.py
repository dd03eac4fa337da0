import notes_store


def handler():
    return notes_store.all_notes()
