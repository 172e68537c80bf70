from datetime import datetime

import pandas as pd
import streamlit as st

from audit_config import RESULTS_DIR
from batch_audit import audit_urls, prepare_output_dir
from cwv_metrics import summarize_outcomes
from url_reader import UrlReadError, read_urls

st.set_page_config(page_title="Lighthouse Batch Audit", layout="wide")

st.title("🚀 Lighthouse Batch Audit")
st.write("Upload a CSV of URLs to run local Lighthouse audits (Desktop + Mobile)")

uploaded_file = st.file_uploader("Upload CSV (no header, URLs in the first column)", type=["csv"])

if uploaded_file:

    try:
        urls = read_urls(uploaded_file)
    except UrlReadError as e:
        st.error(f"❌ {e}")
        st.stop()

    if not urls:
        st.warning("No URLs found in the uploaded file.")
        st.stop()

    st.info(f"{len(urls)} URLs ready. Each one launches two browsers, one at a time.")

    # ---------------- RUN BATCH ---------------- #

    # reruns (widget clicks, downloads) reuse the last batch instead of auditing again
    if st.button(f"Run audits into {RESULTS_DIR}/"):

        progress = st.progress(0)
        output_dir = prepare_output_dir(RESULTS_DIR)
        outcomes = audit_urls(
            urls,
            output_dir,
            progress=lambda done, total: progress.progress(done / total),
        )
        st.session_state["outcomes"] = outcomes
        st.session_state["summary"] = summarize_outcomes(outcomes)

    # ------------------------------------------- #

if "outcomes" in st.session_state:

    outcomes = st.session_state["outcomes"]
    df = st.session_state["summary"]

    failed = sum(1 for o in outcomes if not o.ok)
    st.success(f"Audited {len(outcomes)} URLs ({failed} failed)")

    st.dataframe(pd.DataFrame([
        {
            "URL": o.url,
            "Status": "✅" if o.ok else "❌",
            "Desktop Report": str(o.desktop_path or ""),
            "Mobile Report": str(o.mobile_path or ""),
            "Error": o.error or "",
        }
        for o in outcomes
    ]))

    if "Performance Score" in df:

        st.subheader("📊 Average Performance Score")
        st.bar_chart(df.groupby("Device")["Performance Score"].mean())

        st.subheader("🛠️ Failing Core Web Vitals, worst first")
        failing = df[df["CWV Overall"] == "❌"]
        st.dataframe(
            failing.sort_values("Fix Priority Score", ascending=False)
            .set_index(["URL", "Device"])
            .filter(["Fix Priority Score", "CWV Failed Due To", "Likely Root Cause"])
        )

    st.subheader("Core Web Vitals")
    st.dataframe(df)

    st.download_button(
        "Download CSV Report",
        df.to_csv(index=False).encode("utf-8"),
        f"cwv_report_{datetime.now().date()}.csv",
        "text/csv"
    )
