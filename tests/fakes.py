# tests/fakes.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from domain.exceptions import ProxyError
from domain.ports.llm import LLMProviderPort

SCHEMA_SQL = """
CREATE TABLE customers (customer_id INTEGER PRIMARY KEY, name TEXT);
CREATE TABLE orders (order_id INTEGER PRIMARY KEY, customer_id INTEGER, amount REAL);
""".strip()

DATA_SQL = """
INSERT INTO customers(customer_id, name) VALUES (1, 'a'), (2, 'b'), (3, 'c');
INSERT INTO orders(order_id, customer_id, amount) VALUES (10, 1, 5.0), (11, 1, 7.5), (12, 2, 1.0), (13, 1, 2.5), (14, 3, 4.0);
""".strip()


def envelope(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def sql_question(title: str, solution_sql: str, difficulty: str = "Easy") -> Dict[str, Any]:
    return {
        "title": title,
        "difficulty": difficulty,
        "tags": ["Aggregation"],
        "question": f"{title}?",
        "solution_sql": solution_sql,
        "explanation": "Count the rows.",
    }


def sql_document(
    questions: Optional[List[Dict[str, Any]]] = None,
    schema_sql: str = SCHEMA_SQL,
    data_sql: str = DATA_SQL,
) -> Dict[str, Any]:
    return {
        "schema_sql": schema_sql,
        "data_sql": data_sql,
        "questions": questions or [sql_question("Count orders", "SELECT COUNT(*) AS count FROM orders;")],
    }


def fenced(doc: Dict[str, Any]) -> str:
    return "```json\n" + json.dumps(doc) + "\n```"


class FakeLLM(LLMProviderPort):
    """Replays queued envelopes (or raises queued errors) and records prompts."""

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.calls: List[Dict[str, str]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def generate_content(self, prompt: str, api_key: str) -> Dict[str, Any]:
        self.calls.append({"prompt": prompt, "api_key": api_key})
        if not self.responses:
            raise ProxyError("no response queued", status_code=500)
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


