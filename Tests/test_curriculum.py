import unittest
import os
import sys

# Add root to sys.path
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from Modules import Curriculum


def sample_chapters():
    return [
        {"id": "c1", "title": "Basics", "lessons": [
            {"id": "l1", "title": "Intro", "done": False},
            {"id": "l2", "title": "Setup", "done": True, "note": "done twice"},
        ]},
        {"id": "c2", "title": "Advanced", "lessons": [
            {"id": "l1", "title": "Deep dive", "done": False},
        ]},
    ]


class TestLessons(unittest.TestCase):
    def test_toggle_only_matching_lesson(self):
        chapters = sample_chapters()
        updated = Curriculum.toggle_lesson(chapters, "c1", "l1")
        self.assertTrue(updated[0]["lessons"][0]["done"])
        self.assertTrue(updated[0]["lessons"][1]["done"])
        # Same lesson id in another chapter is untouched
        self.assertFalse(updated[1]["lessons"][0]["done"])
        # Input is not mutated
        self.assertFalse(chapters[0]["lessons"][0]["done"])

    def test_toggle_twice_restores(self):
        chapters = sample_chapters()
        twice = Curriculum.toggle_lesson(Curriculum.toggle_lesson(chapters, "c2", "l1"), "c2", "l1")
        self.assertEqual(twice, chapters)

    def test_toggle_missing_done_flag(self):
        chapters = [{"id": "c", "title": "T", "lessons": [{"id": "x", "title": "X"}]}]
        self.assertTrue(Curriculum.toggle_lesson(chapters, "c", "x")[0]["lessons"][0]["done"])

    def test_unknown_ids_are_noop(self):
        chapters = sample_chapters()
        self.assertEqual(Curriculum.toggle_lesson(chapters, "doesnotexist", "xyz"), chapters)
        self.assertEqual(Curriculum.set_lesson_note(chapters, "c1", "nope", "hi"), chapters)

    def test_noop_keeps_chapter_shape(self):
        chapters = [{"id": "c", "title": "No lessons yet"}]
        self.assertEqual(Curriculum.toggle_lesson(chapters, "c", "x"), chapters)
        self.assertEqual(Curriculum.set_lesson_note(chapters, "c", "x", "hi"), chapters)

    def test_set_note_is_idempotent(self):
        chapters = sample_chapters()
        once = Curriculum.set_lesson_note(chapters, "c1", "l1", "read chapter 2")
        twice = Curriculum.set_lesson_note(once, "c1", "l1", "read chapter 2")
        self.assertEqual(once, twice)
        self.assertEqual(twice[0]["lessons"][0]["note"], "read chapter 2")

    def test_ids_compare_as_strings(self):
        chapters = [{"id": "1", "title": "T", "lessons": [{"id": "2", "title": "X", "done": False}]}]
        self.assertEqual(Curriculum.toggle_lesson(chapters, 1, 2), chapters)


class TestDeadlines(unittest.TestCase):
    def test_new_deadline(self):
        d = Curriculum.new_deadline("Essay", "2024-01-01")
        self.assertTrue(d["id"])
        self.assertEqual(d["title"], "Essay")
        self.assertEqual(d["dueDate"], "2024-01-01")
        self.assertFalse(d["done"])

    def test_ids_are_unique_under_rapid_creation(self):
        ids = {Curriculum.new_deadline("x", "2024-01-01")["id"] for _ in range(200)}
        self.assertEqual(len(ids), 200)

    def test_toggle_and_remove(self):
        deadlines = [
            {"id": "a", "title": "A", "dueDate": "2024-01-01", "done": False},
            {"id": "b", "title": "B", "dueDate": "2024-02-01", "done": False},
        ]
        toggled = Curriculum.toggle_deadline(deadlines, "b")
        self.assertEqual([d["done"] for d in toggled], [False, True])
        self.assertFalse(deadlines[1]["done"])

        remaining = Curriculum.remove_deadline(toggled, "a")
        self.assertEqual(remaining, [toggled[1]])
        self.assertEqual(Curriculum.remove_deadline(deadlines, "zzz"), deadlines)


class TestNormalizeChapters(unittest.TestCase):
    def test_fills_defaults(self):
        raw = [
            {"id": 1, "title": "One", "lessons": [{"id": 7, "title": "Seven"}, "junk"]},
            {"id": "2", "title": "Two"},
            "junk",
        ]
        self.assertEqual(Curriculum.normalize_chapters(raw), [
            {"id": "1", "title": "One", "lessons": [{"id": "7", "title": "Seven", "done": False}]},
            {"id": "2", "title": "Two", "lessons": []},
        ])


if __name__ == '__main__':
    unittest.main()
