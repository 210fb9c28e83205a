from fastapi import Request

from notekeeper.services.accounts import AccountDirectory
from notekeeper.storage.notes_store import NotesStore


def get_notes_store(request: Request) -> NotesStore:
    return request.app.state.notes_store


def get_accounts(request: Request) -> AccountDirectory:
    return request.app.state.accounts
