from __future__ import annotations

import base64
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
import streamlit as st


# -------------------------
# Config
# -------------------------
DEFAULT_API_BASE = os.getenv("API_BASE_URL", "http://localhost:8000")


@dataclass(frozen=True)
class APIError(Exception):
    status_code: int
    detail: str

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.detail}"


class API:
    def __init__(self, base_url: str):
        self.base = base_url.rstrip("/")

    def _req(self, method: str, path: str, timeout: float = 30, **kwargs) -> Any:
        url = f"{self.base}{path}"
        try:
            r = requests.request(method, url, timeout=timeout, **kwargs)
        except requests.RequestException as e:
            raise APIError(0, f"Network error calling {url}: {e}") from e

        if r.status_code >= 400:
            try:
                body = r.json()
                detail = body.get("detail", body) if isinstance(body, dict) else body
            except ValueError:
                detail = r.text
            raise APIError(r.status_code, str(detail))

        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def catalog(self) -> Dict[str, Any]:
        return self._req("GET", "/catalog")

    def create_session(self, kind: str) -> Dict[str, Any]:
        # the python environment imports pandas/matplotlib on start
        return self._req("POST", "/sessions", json={"kind": kind}, timeout=300)

    def get_session(self, session_id: str) -> Dict[str, Any]:
        return self._req("GET", f"/sessions/{session_id}")

    def generate(self, session_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._req("POST", f"/sessions/{session_id}/challenge", json=payload, timeout=300)

    def select_question(self, session_id: str, index: int) -> Dict[str, Any]:
        return self._req("POST", f"/sessions/{session_id}/questions/{index}")

    def run(self, session_id: str, code: str) -> Dict[str, Any]:
        return self._req("POST", f"/sessions/{session_id}/run", json={"code": code}, timeout=300)

    def submit(self, session_id: str, code: str) -> Dict[str, Any]:
        return self._req("POST", f"/sessions/{session_id}/submit", json={"code": code}, timeout=300)


# -------------------------
# UI helpers
# -------------------------
def section_title(txt: str) -> None:
    st.markdown(f"### {txt}")


def show_error(e: Exception) -> None:
    st.error(str(e))


def ensure_session(api: API, kind: str) -> Optional[Dict[str, Any]]:
    key = f"{kind}_session_id"
    if key not in st.session_state:
        with st.spinner("Loading execution environment..."):
            try:
                snap = api.create_session(kind)
            except APIError as e:
                show_error(e)
                return None
        st.session_state[key] = snap["session_id"]
        return snap
    try:
        return api.get_session(st.session_state[key])
    except APIError as e:
        if e.status_code == 404:
            del st.session_state[key]
        show_error(e)
        return None


def show_rows(rows: List[Dict[str, Any]]) -> None:
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.caption("No rows returned.")


def show_result(result: Optional[Dict[str, Any]]) -> None:
    if not result:
        return
    if not result["success"]:
        st.error(result["error"])
        return
    if isinstance(result["output"], str):
        st.code(result["output"] or "(no output)", language="text")
    else:
        show_rows(result["output"])
    if result.get("image"):
        st.image(base64.b64decode(result["image"]))


def show_feedback(snap: Dict[str, Any]) -> None:
    outcome = snap.get("last_outcome")
    if outcome is not None:
        if outcome["match"]:
            st.success(outcome["feedback"])
            st.balloons()
        elif outcome["match"] is None:
            st.warning(outcome["feedback"])
        else:
            st.error(outcome["feedback"])
    elif snap.get("feedback"):
        st.info(snap["feedback"])


def environment_badge(snap: Dict[str, Any]) -> None:
    if snap["state"] == "environment_failed":
        st.error(f"Environment failed: {snap['environment_error']}")
    else:
        st.caption(f"Environment: {snap['state'].replace('_', ' ')}")


# -------------------------
# Streamlit App
# -------------------------
st.set_page_config(page_title="Interview Pad", layout="wide")

with st.sidebar:
    st.subheader("Connection")
    api_base = st.text_input("API base URL", value=DEFAULT_API_BASE)
    api = API(api_base)
    api_key = st.text_input("Gemini API key", type="password", placeholder="Optional if configured...")

    st.divider()
    page = st.radio("Mode", ["SQL Pad", "Python Pad"], index=0)

try:
    catalog = api.catalog()
except APIError as e:
    show_error(e)
    st.stop()

# -------------------------
# SQL Pad
# -------------------------
if page == "SQL Pad":
    st.title("SQL Interview Pad")
    snap = ensure_session(api, "sql")
    if snap is None:
        st.stop()
    environment_badge(snap)
    sid = snap["session_id"]

    left, right = st.columns([1, 1.4])

    with left:
        section_title("Generator")
        mode = st.radio("Mode", catalog["modes"], horizontal=True, key="sql_mode")
        topic = ""
        company = ""
        if mode == "manual":
            topic = st.text_area("Scenario", placeholder="e.g. Identifying churned users in a SaaS model...")
        elif mode == "company":
            company = st.text_input("Company Name", placeholder="e.g. Airbnb, Uber")
        difficulty = st.selectbox("Difficulty", catalog["difficulties"], index=1)

        if st.button("Generate", type="primary", disabled=snap["state"] == "environment_failed"):
            payload = {"mode": mode, "topic": topic, "company": company, "difficulty": difficulty, "apiKey": api_key or None}
            with st.spinner("Generating challenge..."):
                try:
                    snap = api.generate(sid, payload)
                except APIError as e:
                    show_error(e)

        report = snap.get("load_report")
        if report:
            section_title("Tables")
            for table, rows in report["previews"].items():
                st.markdown(f"**{table}**")
                show_rows(rows)
            if report["statements_skipped"]:
                st.warning(f"{report['statements_skipped']} data statement(s) were skipped.")

    with right:
        challenge = snap.get("challenge")
        if challenge:
            count = snap["question_count"]
            idx = snap["current_index"]
            if count > 1:
                new_idx = st.number_input("Question", min_value=1, max_value=count, value=idx + 1, step=1) - 1
                if new_idx != idx:
                    try:
                        snap = api.select_question(sid, int(new_idx))
                        idx = snap["current_index"]
                    except APIError as e:
                        show_error(e)

            q = challenge["questions"][idx]
            section_title(q["title"])
            st.caption(f"{q['difficulty']} · {', '.join(q['tags'])}")
            st.markdown(q["question"])

            tab_editor, tab_expected, tab_solution = st.tabs(["Editor", "Expected Output", "Solution"])
            with tab_editor:
                query = st.text_area(
                    "SQL", value="SELECT * FROM ...", height=200, key=f"sql_query_{challenge['fingerprint']}_{idx}"
                )
                if st.button("Run Query", type="primary"):
                    try:
                        api.submit(sid, query)
                    except APIError as e:
                        show_error(e)
                    snap = api.get_session(sid)
                show_feedback(snap)
                show_result(snap.get("last_result"))
            with tab_expected:
                show_result(snap.get("expected_result"))
            with tab_solution:
                st.code(q["solution"], language="sql")
                st.markdown(q["explanation"])
        else:
            show_feedback(snap)
            st.info("Configure and generate to start.")

# -------------------------
# Python Pad
# -------------------------
elif page == "Python Pad":
    st.title("Python Data Science Pad")
    snap = ensure_session(api, "python")
    if snap is None:
        st.stop()
    environment_badge(snap)
    sid = snap["session_id"]

    left, right = st.columns([1, 1.4])

    with left:
        section_title("Session Setup")
        datasets = {d["id"]: d for d in catalog["datasets"]}
        dataset = st.selectbox("Dataset", list(datasets), format_func=lambda i: datasets[i]["name"])
        st.caption(datasets[dataset]["description"])
        stage = st.selectbox("Interview Stage", catalog["stages"])

        ready = snap["state"] in ("ready", "challenge_ready")
        if st.button("Generate Interview Question", type="primary", disabled=not ready):
            payload = {"dataset": dataset, "stage": stage, "apiKey": api_key or None}
            with st.spinner("Generating challenge..."):
                try:
                    snap = api.generate(sid, payload)
                except APIError as e:
                    show_error(e)

        challenge = snap.get("challenge")
        if challenge:
            q = challenge["questions"][0]
            section_title(q["title"])
            if challenge.get("dataset_description"):
                st.markdown(f"**Dataset:** {challenge['dataset_description']}")
            st.markdown(q["task_details"] or q["question"])
            st.info("Tip: Use print() to see output. Matplotlib figures are rendered below the output.")

    with right:
        challenge = snap.get("challenge")
        if challenge:
            q = challenge["questions"][0]
            tab_editor, tab_solution = st.tabs(["Python Editor", "Solution"])
            with tab_editor:
                code = st.text_area("Code", value=q["starter_code"], height=300, key=f"py_code_{challenge['fingerprint']}")
                c1, c2 = st.columns(2)
                if c1.button("Run Code"):
                    try:
                        api.run(sid, code)
                    except APIError as e:
                        show_error(e)
                    snap = api.get_session(sid)
                if c2.button("Check Answer", type="primary"):
                    try:
                        api.submit(sid, code)
                    except APIError as e:
                        show_error(e)
                    snap = api.get_session(sid)
                show_feedback(snap)
                show_result(snap.get("last_result"))
            with tab_solution:
                st.code(q["solution"], language="python")
                st.markdown(q["explanation"])
        else:
            show_feedback(snap)
            st.info("Configure and generate to start.")
