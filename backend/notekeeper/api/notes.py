from uuid import UUID

from fastapi import APIRouter, Depends

from notekeeper.api.deps import get_notes_store
from notekeeper.models.notes import EmptyTrashOut, NoteCreate, NoteOut, NoteUpdate
from notekeeper.storage.notes_store import Note, NotesStore
from notekeeper.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/notes", tags=["notes"])


def _out(notes: list[Note]) -> list[NoteOut]:
    return [NoteOut(**n.to_dict()) for n in notes]


@router.post("", response_model=NoteOut, status_code=201)
def create_note(
    payload: NoteCreate,
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    note = store.create_note(
        user_id=user_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        color=payload.color,
        reminder=payload.reminder,
    )
    return NoteOut(**note.to_dict())


@router.get("", response_model=list[NoteOut])
def list_notes(
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.list_notes(user_id))


# fixed paths are declared before /{note_id}


@router.get("/search", response_model=list[NoteOut])
def search_notes(
    query: str = "",
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.search_notes(user_id, query))


@router.get("/archived", response_model=list[NoteOut])
def list_archived(
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.list_archived(user_id))


@router.get("/tag/{tag}", response_model=list[NoteOut])
def list_by_tag(
    tag: str,
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.list_by_tag(user_id, tag))


@router.get("/trashed", response_model=list[NoteOut])
def list_trashed(
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.list_trashed(user_id))


@router.delete("/trashed/empty", response_model=EmptyTrashOut)
def empty_trash(
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> EmptyTrashOut:
    return EmptyTrashOut(deleted=store.empty_trash(user_id))


@router.get("/reminders", response_model=list[NoteOut])
def list_reminders(
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> list[NoteOut]:
    return _out(store.list_reminders(user_id))


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: UUID,
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    note = store.get_note(user_id=user_id, note_id=str(note_id))
    return NoteOut(**note.to_dict())


@router.put("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    updated = store.update_note(
        user_id=user_id,
        note_id=str(note_id),
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        color=payload.color,
        reminder=payload.reminder,
        archived=payload.archived,
        trashed=payload.trashed,
    )
    return NoteOut(**updated.to_dict())


@router.delete("/{note_id}", response_model=NoteOut)
def trash_note(
    note_id: UUID,
    user_id: str = Depends(get_current_user),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    note = store.trash_note(user_id=user_id, note_id=str(note_id))
    return NoteOut(**note.to_dict())
