from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from domain.exceptions import ValidationError
from domain.models.catalog import DIFFICULTIES, SQL_MODES, STAGES, find_dataset
from domain.models.challenge import ChallengeKind


@dataclass(frozen=True)
class GenerationParams:
    mode: str = "manual"  # manual | auto | company
    topic: str = ""
    company: str = ""
    difficulty: str = "Medium"
    dataset: str = "titanic"
    stage: str = STAGES[0]


_SQL_RULES = """
IMPORTANT RULES:
- Use snake_case for column names.
- Escape single quotes with double single-quotes ('') in SQL.

COMPLEXITY:
- Easy: Max 2 tables, basic joins/aggs.
- Medium: Max 3 tables, subqueries, basic window functions.
- Hard: Max 4 tables, CTEs, advanced window functions, self-joins.
""".strip()


def _sql_question_example(difficulty: str) -> dict:
    return {
        "title": "Short title",
        "difficulty": difficulty,
        "tags": ["Tag1", "Tag2"],
        "question": "The question text...",
        "solution_sql": "The SQL solution...",
        "explanation": "Explanation...",
    }


def build_sql_prompt(params: GenerationParams) -> str:
    mode = params.mode
    if mode not in SQL_MODES:
        raise ValidationError(f"Unknown mode '{mode}'. Expected one of {SQL_MODES}.")
    if params.difficulty not in DIFFICULTIES:
        raise ValidationError(f"Unknown difficulty '{params.difficulty}'. Expected one of {DIFFICULTIES}.")

    topic = params.topic.strip()
    company = params.company.strip()
    if mode == "manual" and not topic:
        raise ValidationError("Please enter a topic.")
    if mode == "company" and not company:
        raise ValidationError("Please enter a company name.")

    if mode == "company":
        context = (
            f'Context: The user is preparing for a Data Science interview at "{company}".\n'
            "Task:\n"
            f"1. Generate a realistic, relational database schema relevant to {company}'s core business.\n"
            "2. Generate a series of 5 SQL interview questions based on this schema.\n"
            "3. The questions must be progressive: Question 1 is Easy, Question 5 is Hard."
        )
        example = {
            "schema_sql": "Standard SQLite CREATE TABLE statements...",
            "data_sql": "INSERT INTO statements... Ensure primary keys are unique.",
            "questions": [_sql_question_example(d) for d in ("Easy", "Easy", "Medium", "Hard", "Hard")],
        }
    else:
        if mode == "manual":
            topic_text = f'Topic: "{topic}"'
        else:
            topic_text = f"Topic: Random realistic business scenario. Difficulty: {params.difficulty}."
        context = f"Task: Create a single SQL coding challenge. {topic_text}"
        example = {
            "schema_sql": "Standard SQLite CREATE TABLE statements...",
            "data_sql": "INSERT INTO statements...",
            "questions": [_sql_question_example(params.difficulty)],
        }

    return "\n\n".join([
        "You are an expert Technical Interviewer for Senior Data Science roles.",
        context,
        "You MUST return a STRICT JSON object. Do not include any text outside the JSON.",
        "The JSON must have this exact structure:\n" + json.dumps(example, indent=2),
        _SQL_RULES,
    ])


def build_python_prompt(params: GenerationParams) -> str:
    dataset = find_dataset(params.dataset)
    if dataset is None:
        raise ValidationError(f"Unknown dataset '{params.dataset}'.")
    if params.stage not in STAGES:
        raise ValidationError(f"Unknown interview stage '{params.stage}'.")

    example = {
        "title": "Short Title",
        "dataset_description": "Brief description (max 3 sentences)",
        "task_details": "Detailed instructions with bullet points if needed",
        "question": "Summary question text...",
        "starter_code": f"import pandas as pd\ndf = pd.read_csv('{dataset.filename}')\n# Your code here",
        "solution_code": "Full working solution code...",
        "explanation": "Why this approach is correct...",
    }

    return "\n\n".join([
        "You are a Senior Data Science Interviewer.\nGenerate a coding interview question.",
        "Context:\n"
        f'- Dataset: {dataset.name} (Filename: "{dataset.filename}")\n'
        f"- Interview Stage: {params.stage}",
        "Task:\n"
        "1. Create a specific, solvable task relevant to this stage "
        '(e.g., "Calculate missing values" for EDA, or "Train a Random Forest" for Modeling).\n'
        "2. Provide starter code that loads the data.\n"
        "3. Provide the solution code. It must print its final answer so the output can be compared.",
        "Return STRICT JSON:\n" + json.dumps(example, indent=2),
    ])


def build_prompt(kind: ChallengeKind, params: GenerationParams) -> str:
    if kind == "sql":
        return build_sql_prompt(params)
    if kind == "python":
        return build_python_prompt(params)
    raise ValidationError(f"Unknown challenge kind '{kind}'.")


def require_prompt(prompt: Optional[str]) -> str:
    if prompt is None or not prompt.strip():
        raise ValidationError("Prompt is empty.")
    return prompt
