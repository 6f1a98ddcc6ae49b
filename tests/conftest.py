import pytest

from analysis.dataset import Dataset


SALARY_ROWS = [
    {"dept": "eng", "salary": 100},
    {"dept": "eng", "salary": 200},
    {"dept": "sales", "salary": 50},
]


@pytest.fixture
def salary_dataset():
    return Dataset.from_records(SALARY_ROWS, columns=["dept", "salary"])


@pytest.fixture
def mixed_dataset():
    """Two categorical columns (3 and 18 distinct values) and four numeric ones."""
    rows = []
    for i in range(20):
        rows.append({
            "region": ["north", "south", "west"][i % 3],
            "store": f"store-{i % 18}",
            "units": i,
            "price": str(10 + i * 0.5),
            "cost": 5 + i,
            "margin": i % 4,
        })
    return Dataset.from_records(rows, columns=["region", "store", "units", "price", "cost", "margin"])


class StubCompletion:
    """Deterministic stand-in for the insight service; records every request."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def stub_completion():
    return StubCompletion


STRUCTURED_REPLY = """Here is my analysis:
{"dataType": "Employee data", "keyInsights": ["Engineering dominates"],
 "trends": ["Salaries vary widely"], "recommendations": ["Add hire dates"],
 "summary": "Small payroll extract."}
Hope this helps."""


@pytest.fixture
def salary_rows():
    return [dict(r) for r in SALARY_ROWS]


@pytest.fixture
def structured_reply():
    return STRUCTURED_REPLY
