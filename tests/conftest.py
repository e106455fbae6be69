import pytest
from datetime import date

from otk.dates import absolute_day
from otk.models import HeadlineNode, Outline


@pytest.fixture
def today():
    """Absolute day number for 2024-01-10."""
    return absolute_day(date(2024, 1, 10))


@pytest.fixture
def sample_outline_data():
    """Nested outline data as an external parser would hand it over."""
    return {
        "title": "tasks.org",
        "headlines": [
            {
                "title": "Projects",
                "tags": ["work"],
                "children": [
                    {
                        "title": "Write report",
                        "todo": "TODO",
                        "tags": ["work", "writing"],
                        "scheduled": "2024-01-10",
                        "category": "work",
                        "children": [
                            {
                                "title": "Collect figures",
                                "todo": "NEXT",
                                "deadline": "2024-01-12",
                                "category": "work",
                            },
                        ],
                    },
                    {
                        "title": "Send invoice",
                        "todo": "DONE",
                        "scheduled": "2024-01-05",
                        "category": "work",
                    },
                ],
            },
            {
                "title": "Buy milk",
                "todo": "TODO",
                "tags": ["home", "errand"],
                "scheduled": "2024-01-20",
                "category": "home",
            },
            {
                "title": "Notes",
                "children": [
                    {
                        "title": "Reply from Bob",
                        "todo": "WAITING",
                        "properties": {":CUSTOM_ID": "bob-reply", ":parent": "Notes"},
                    },
                ],
            },
        ],
    }


@pytest.fixture
def sample_outline(sample_outline_data):
    """The sample outline as a tree of HeadlineNode."""
    return Outline.from_dict(sample_outline_data)


@pytest.fixture
def preorder_titles():
    """Titles of the sample outline in document order."""
    return [
        "Projects",
        "Write report",
        "Collect figures",
        "Send invoice",
        "Buy milk",
        "Notes",
        "Reply from Bob",
    ]


def make_node(title="Task", **kwargs):
    """Build a single headline from keyword arguments."""
    data = {"title": title}
    data.update(kwargs)
    return HeadlineNode.from_dict(data)


@pytest.fixture
def node_factory():
    return make_node
