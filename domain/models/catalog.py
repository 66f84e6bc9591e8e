from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Dataset:
    id: str
    name: str
    url: str
    description: str

    @property
    def filename(self) -> str:
        return f"{self.id}.csv"


DATASETS: List[Dataset] = [
    Dataset(
        id="titanic",
        name="Titanic Survival",
        url="https://raw.githubusercontent.com/datasciencedojo/datasets/master/titanic.csv",
        description="Predict survival on the Titanic based on passenger demographics.",
    ),
    Dataset(
        id="housing",
        name="California Housing",
        url="https://raw.githubusercontent.com/ageron/handson-ml/master/datasets/housing/housing.csv",
        description="Predict median house values in California districts.",
    ),
    Dataset(
        id="iris",
        name="Iris Flowers",
        url="https://raw.githubusercontent.com/mwaskom/seaborn-data/master/iris.csv",
        description="Classify iris flowers into three species.",
    ),
]

STAGES: List[str] = [
    "Exploratory Data Analysis (EDA)",
    "Data Preprocessing",
    "Feature Engineering",
    "Model Building",
    "Model Evaluation",
]

SQL_MODES: List[str] = ["manual", "auto", "company"]
DIFFICULTIES: List[str] = ["Easy", "Medium", "Hard"]

_BY_ID: Dict[str, Dataset] = {d.id: d for d in DATASETS}


def find_dataset(dataset_id: str) -> Optional[Dataset]:
    return _BY_ID.get(dataset_id)
