from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st
from sqlalchemy import select

from auth import STAFF_ROLES, authenticate_user, get_user_by_id, require_role
from db import configure_logging, db_session, init_schema
from models import (
    PostGraduateApplication,
    Result,
    ScholarshipCriteria,
    SPFSCAssessment,
    USPFoundationAssessment,
    User,
)
from reports import (
    performance_analytics,
    postgraduate_statistics,
    scholarship_type_summary,
    spfsc_statistics,
    subject_analysis,
    usp_foundation_statistics,
)
from seed import (
    load_scholarships_from_csv,
    preview_diff,
    reset_and_seed,
    seed_default_users,
    seed_scholarships_if_empty,
    upsert_scholarships,
)


st.set_page_config(page_title="Exam Portal Eligibility", layout="wide")


@st.cache_resource
def bootstrap() -> None:
    configure_logging()
    init_schema()
    with db_session() as db:
        seed_default_users(db)
        seed_scholarships_if_empty(db)


def get_current_user() -> User | None:
    auth_payload = st.session_state.get("auth_user")
    if not auth_payload:
        return None
    with db_session() as db:
        user = get_user_by_id(db, auth_payload["id"])
    if not user:
        st.session_state.pop("auth_user", None)
    return user


def render_login() -> User | None:
    user = get_current_user()
    if user:
        st.sidebar.success(f"Logged in as {user.email} ({user.role})")
        if st.sidebar.button("Logout"):
            st.session_state.pop("auth_user", None)
            st.rerun()
        return user

    st.sidebar.subheader("Staff Login")
    with st.sidebar.form("login_staff"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        with db_session() as db:
            found = authenticate_user(db, email, password)
        if not found or found.role not in STAFF_ROLES:
            st.sidebar.error("Invalid credentials or role")
        else:
            st.session_state["auth_user"] = {"id": str(found.id), "role": found.role, "email": found.email}
            st.rerun()
    return None


@st.cache_data(ttl=30)
def load_rows(model_name: str, academic_year: str | None) -> list[dict[str, Any]]:
    model = {
        "spfsc": SPFSCAssessment,
        "usp": USPFoundationAssessment,
        "postgraduate": PostGraduateApplication,
        "results": Result,
    }[model_name]
    stmt = select(model)
    if academic_year:
        stmt = stmt.where(model.academic_year == academic_year)
    if model is Result:
        stmt = stmt.where(Result.is_published.is_(True))
    with db_session() as db:
        rows = db.scalars(stmt).all()
    return [{c.name: getattr(row, c.name) for c in model.__table__.columns} for row in rows]


@st.cache_data(ttl=30)
def load_catalog() -> list[dict[str, Any]]:
    with db_session() as db:
        rows = db.scalars(select(ScholarshipCriteria).order_by(ScholarshipCriteria.scholarship_name)).all()
    return [{c.name: getattr(row, c.name) for c in ScholarshipCriteria.__table__.columns} for row in rows]


def _metric_row(values: dict[str, Any]) -> None:
    cols = st.columns(len(values))
    for col, (label, value) in zip(cols, values.items()):
        col.metric(label, value)


def _bar(title: str, counts: dict[str, Any]) -> None:
    st.markdown(f"#### {title}")
    series = pd.Series(counts)
    if series.sum() > 0:
        st.bar_chart(series)
    else:
        st.caption("No data yet.")


def render_spfsc_tab(academic_year: str | None) -> None:
    stats = spfsc_statistics(load_rows("spfsc", academic_year))
    _metric_row(
        {
            "Assessments": stats["total"],
            "Meet minimum criteria": stats["meets_criteria"],
            "Scholarship eligible": stats["eligibility"]["scholarship_eligible"],
            "Average GPA": f"{stats['averages']['gpa']:.2f}",
            "Average %": f"{stats['averages']['percentage']:.1f}",
        }
    )
    left, right = st.columns(2)
    with left:
        _bar("Top-four grade mix", stats["grade_distribution"])
    with right:
        _bar("English performance", stats["english_performance"])
    _bar("Certificate status", stats["certificate_status"])
    if stats["top_performers"]:
        st.markdown("#### Top performers")
        st.dataframe(pd.DataFrame(stats["top_performers"]), use_container_width=True)


def render_usp_tab(academic_year: str | None) -> None:
    stats = usp_foundation_statistics(load_rows("usp", academic_year))
    _metric_row(
        {
            "Assessments": stats["total"],
            "Eligible for a pathway": stats["overall_eligible"],
            "Medicine eligible": stats["pathway_breakdown"]["medicine_eligible"],
            "Average GPA": f"{stats['averages']['gpa']:.2f}",
        }
    )
    left, right = st.columns(2)
    with left:
        _bar("Pathway eligibility", stats["pathway_breakdown"])
    with right:
        _bar("GPA distribution", stats["gpa_distribution"])
    _bar("Requirements met", stats["requirements"])
    if stats["top_performers"]:
        st.markdown("#### Top performers")
        st.dataframe(pd.DataFrame(stats["top_performers"]), use_container_width=True)


def render_postgraduate_tab(academic_year: str | None) -> None:
    stats = postgraduate_statistics(load_rows("postgraduate", academic_year))
    _metric_row(
        {
            "Applications": stats["total"],
            "Eligible": stats["eligibility"]["eligible"],
            "Research degrees": stats["research_degrees"]["total"],
            "Average applicant GPA": f"{stats['average_gpa']:.2f}",
        }
    )
    left, right = st.columns(2)
    with left:
        _bar("By applicant type", stats["by_applicant_type"])
    with right:
        _bar("By programme level", stats["by_programme_level"])
    _bar("By status", stats["by_status"])


def render_results_tab(academic_year: str | None) -> None:
    results = load_rows("results", academic_year)
    analytics = performance_analytics(results)
    if analytics is None:
        st.info("No published results for this selection.")
        return
    _metric_row(
        {
            "Results": analytics["total_results"],
            "Average %": analytics["scores"]["average"],
            "Highest %": analytics["scores"]["highest"],
            "Pass rate": f"{analytics['pass_fail']['pass_rate']}%",
        }
    )
    _bar("Letter grade distribution", analytics["grade_distribution"])
    st.markdown("#### By subject")
    st.dataframe(pd.DataFrame(subject_analysis(results)), use_container_width=True)


def render_scholarships_tab(user: User) -> None:
    catalog = load_catalog()
    summary = scholarship_type_summary(catalog)
    if summary:
        st.dataframe(pd.DataFrame(summary), use_container_width=True)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Scholarship": s["scholarship_name"],
                    "Level": s["level"],
                    "Type": s["scholarship_type"],
                    "Min GPA": (s["academic_criteria"] or {}).get("minimum_gpa", "-"),
                    "Min %": (s["academic_criteria"] or {}).get("minimum_percentage", "-"),
                    "Active": "Yes" if s["is_active"] else "No",
                }
                for s in catalog
            ]
        ),
        use_container_width=True,
    )

    if user.role != "administrator":
        return
    if st.button("Reset catalog to defaults"):
        with db_session() as db:
            reset_and_seed(db)
        load_catalog.clear()
        st.rerun()

    st.markdown("#### Import catalog CSV")
    upload = st.file_uploader("Scholarship CSV", type=["csv"])
    if upload is None:
        return
    try:
        rows = load_scholarships_from_csv(upload.getvalue().decode("utf-8"))
    except ValueError as exc:
        st.error(str(exc))
        return
    with db_session() as db:
        diff = preview_diff(db, rows)
    st.write(f"{diff['insert']} new, {diff['update']} updated")
    if st.button("Apply import", type="primary"):
        require_role(user, "administrator")
        with db_session() as db:
            outcome = upsert_scholarships(db, rows, actor_user_id=str(user.id))
        load_catalog.clear()
        st.success(f"Inserted {outcome['inserted']}, updated {outcome['updated']}.")


def main() -> None:
    bootstrap()
    user = render_login()
    st.title("Eligibility Dashboard")
    if user is None:
        st.info("Log in with a staff account to view eligibility statistics.")
        return

    academic_year = st.sidebar.text_input("Academic year (blank for all)").strip() or None
    spfsc_tab, usp_tab, pg_tab, results_tab, scholarships_tab = st.tabs(
        ["SPFSC", "USP Foundation", "Postgraduate", "Results", "Scholarships"]
    )
    with spfsc_tab:
        render_spfsc_tab(academic_year)
    with usp_tab:
        render_usp_tab(academic_year)
    with pg_tab:
        render_postgraduate_tab(academic_year)
    with results_tab:
        render_results_tab(academic_year)
    with scholarships_tab:
        render_scholarships_tab(user)


if __name__ == "__main__":
    main()
