"""
Tests for collection edit operations.
"""
import pytest
from pydantic import ValidationError

from folio.editing import editor
from folio.editing.editor import DuplicateIdError, IdGenerator, format_tags, parse_tags
from folio.personal.defaults import default_portfolio, new_record
from folio.personal.models import Experience, Skill


@pytest.fixture
def experiences():
    return [
        Experience(id=10, title="Lead", company="A", date="2022", description="x"),
        Experience(id=20, title="Dev", company="B", date="2020", description="y"),
    ]


def test_project_lifecycle():
    """Test add, tag update and removal starting from an empty list."""
    projects = editor.add([], lambda: new_record("projects", 1001))
    assert len(projects) == 1
    assert projects[0].title == "New Project"
    assert projects[0].tags == []

    projects = editor.update(projects, 1001, "tags", parse_tags("a, b"))
    assert projects[0].tags == ["a", "b"]

    assert editor.remove(projects, 1001) == []


def test_add_prepends(experiences):
    result = editor.add(experiences, lambda: new_record("experiences", 30))

    assert [e.id for e in result] == [30, 10, 20]
    assert [e.id for e in experiences] == [10, 20]


def test_add_then_remove_restores_original(experiences):
    result = editor.remove(editor.add(experiences, lambda: new_record("experiences", 99)), 99)

    assert result == experiences


def test_add_rejects_duplicate_id(experiences):
    with pytest.raises(DuplicateIdError):
        editor.add(experiences, lambda: new_record("experiences", 10))


def test_remove_unknown_id_is_noop(experiences):
    result = editor.remove(experiences, 12345)

    assert result == experiences
    assert result is not experiences


def test_update_changes_only_target_field(experiences):
    result = editor.update(experiences, 20, "company", "C")

    assert result[1].company == "C"
    assert result[1].model_dump(exclude={"company"}) == experiences[1].model_dump(exclude={"company"})
    assert result[0] == experiences[0]
    assert experiences[1].company == "B"


def test_update_accepts_alias():
    projects = [new_record("projects", 1)]

    result = editor.update(projects, 1, "liveUrl", "https://example.com")

    assert result[0].live_url == "https://example.com"


def test_update_unknown_id_is_noop(experiences):
    assert editor.update(experiences, 999, "title", "Z") == experiences


def test_update_unknown_field_raises(experiences):
    with pytest.raises(KeyError):
        editor.update(experiences, 10, "salary", 1)


def test_update_validates_value(experiences):
    with pytest.raises(ValidationError):
        editor.update(experiences, 10, "title", ["not", "a", "string"])


def test_update_skill_by_position():
    skills = default_portfolio().skills

    result = editor.update_skill(skills, 1, 0, "color", "#123456")

    assert result[1].skills[0].color == "#123456"
    assert result[1].skills[0].name == skills[1].skills[0].name
    assert skills[1].skills[0].color == "#339933"
    assert result[0] == skills[0]


def test_update_skill_out_of_range_is_noop():
    skills = default_portfolio().skills

    assert editor.update_skill(skills, 9, 0, "name", "X") == skills
    assert editor.update_skill(skills, 0, 99, "name", "X") == skills


def test_delete_skill_shifts_positions():
    skills = default_portfolio().skills
    second = skills[2].skills[1]

    result = editor.delete_skill(skills, 2, 0)

    assert result[2].skills[0] == second
    assert len(result[2].skills) == len(skills[2].skills) - 1
    assert len(skills[2].skills) == 3


def test_add_skill_appends():
    skills = default_portfolio().skills
    skill = Skill(name="Python", icon="FaReact", color="#3776AB")

    result = editor.add_skill(skills, 3, skill)

    assert result[3].skills[-1] == skill
    assert len(skills[3].skills) == 4


@pytest.mark.parametrize("text, expected", [
    ("a, b", ["a", "b"]),
    (" React ,, Node.js , ", ["React", "Node.js"]),
    ("", []),
    ("single", ["single"]),
])
def test_parse_tags(text, expected):
    assert parse_tags(text) == expected


def test_tags_round_trip_canonical_string():
    text = "React, Node.js, MongoDB"

    assert format_tags(parse_tags(text)) == text
    assert parse_tags(format_tags(parse_tags(text))) == parse_tags(text)


def test_id_generator_same_millisecond():
    generator = IdGenerator(clock=lambda: 1700000000.0)

    ids = [generator.next_id() for _ in range(3)]

    assert ids == [1700000000000, 1700000000001, 1700000000002]


def test_id_generator_skips_existing():
    generator = IdGenerator(clock=lambda: 1.0)

    assert generator.next_id([1000, 1001]) == 1002
    assert generator.next_id([1000, 1001]) == 1003
