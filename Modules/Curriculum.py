"""
Record operations for the two study collections.

Every function takes a collection as loaded from disk and returns a new
list; the input is never mutated. Identifiers are compared as exact
strings. An identifier that matches nothing leaves the collection as it
was, and callers still report success with the unchanged list.
"""
import uuid


def _map_lessons(chapters, chapter_id, lesson_id, change):
    updated = []
    chapter_done = False
    for chapter in chapters:
        if chapter_done or not isinstance(chapter, dict) or chapter.get("id") != chapter_id:
            updated.append(chapter)
            continue
        chapter_done = True
        lessons = []
        lesson_done = False
        for lesson in chapter.get("lessons") or []:
            if not lesson_done and isinstance(lesson, dict) and lesson.get("id") == lesson_id:
                lesson = change(dict(lesson))
                lesson_done = True
            lessons.append(lesson)
        # Chapters without a matching lesson keep their exact shape
        updated.append({**chapter, "lessons": lessons} if lesson_done else chapter)
    return updated


def toggle_lesson(chapters, chapter_id, lesson_id):
    """Flip 'done' on the first matching lesson of the first matching chapter."""
    def flip(lesson):
        lesson["done"] = not lesson.get("done", False)
        return lesson
    return _map_lessons(chapters, chapter_id, lesson_id, flip)


def set_lesson_note(chapters, chapter_id, lesson_id, note):
    def write_note(lesson):
        lesson["note"] = note
        return lesson
    return _map_lessons(chapters, chapter_id, lesson_id, write_note)


def new_deadline(title, due_date):
    return {
        "id": uuid.uuid4().hex,
        "title": title,
        "dueDate": due_date,
        "done": False,
    }


def toggle_deadline(deadlines, deadline_id):
    updated = []
    for deadline in deadlines:
        if isinstance(deadline, dict) and deadline.get("id") == deadline_id:
            deadline = {**deadline, "done": not deadline.get("done", False)}
        updated.append(deadline)
    return updated


def remove_deadline(deadlines, deadline_id):
    return [d for d in deadlines if not (isinstance(d, dict) and d.get("id") == deadline_id)]


def normalize_chapters(raw):
    """
    Shapes seed data into Chapter records: ids and titles become strings,
    missing lesson lists become [], missing 'done' flags become False.
    Entries that are not maps are dropped.
    """
    chapters = []
    for chapter in raw or []:
        if not isinstance(chapter, dict):
            continue
        lessons = []
        for lesson in chapter.get("lessons") or []:
            if not isinstance(lesson, dict):
                continue
            item = {
                "id": str(lesson.get("id", "")),
                "title": str(lesson.get("title", "")),
                "done": bool(lesson.get("done", False)),
            }
            if lesson.get("note"):
                item["note"] = str(lesson["note"])
            lessons.append(item)
        chapters.append({
            "id": str(chapter.get("id", "")),
            "title": str(chapter.get("title", "")),
            "lessons": lessons,
        })
    return chapters
