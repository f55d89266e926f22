"""
Streamlit quote calculator for technicians.

Features:
- Service picker and units entry
- Quote breakdown with buffer/minimum-charge trace
- House type guess from the job address
- Export to CSV
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from clearview_pricing.engine import PricingEngine, PricingError, QuoteRequest
from clearview_pricing.services.house_type import guess_house_type


st.set_page_config(
    page_title="ClearView Quote Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


try:
    engine = get_engine()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Job Context
# ============================================================================
with st.sidebar:
    st.header("🏠 Job Context")

    with st.container(border=True):
        address = st.text_input("Job Address", value="", key="address_input")
        guess = guess_house_type(address)
        st.markdown("**House Type:**")
        if guess.is_default:
            st.markdown(f":gray[**{guess.house_type}**]")
        else:
            st.markdown(f":blue[**{guess.house_type}**] (matched `{guess.matched_keyword}`)")

    st.divider()

    st.caption(f"Tax rate: {engine.config.tax_rate * 100:.1f}%")
    if engine.config.buffer_rate:
        st.caption(f"Buffer: {engine.config.buffer_rate * 100:.1f}%")


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("ClearView Quote Calculator")
st.caption(f"v1.0 | {len(engine.catalog)} services | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["⚡ Quote", "📚 Services"])

with tab1:
    col1, col2 = st.columns([1.4, 1.6], gap="large")

    with col1:
        st.subheader("Service")
        services = engine.list_services()
        labels = {f"{s.name} (${s.price_per_unit:.2f} / {s.unit})": s.id for s in services}
        selected = st.selectbox("Service", options=list(labels.keys()), label_visibility="collapsed")
        units = st.number_input("Units", min_value=0.0, value=1.0, step=0.5, key="units")

    with col2:
        st.subheader("Quote Summary")

        with st.container(border=True):
            try:
                quote = engine.calculate(QuoteRequest(service_id=labels[selected], units=units))
            except PricingError as e:
                st.warning(e.message)
                quote = None

            if quote:
                m1, m2, m3 = st.columns(3)
                m1.metric("Subtotal", f"${quote.subtotal:,.2f}")
                m2.metric("Tax", f"${quote.tax:,.2f}")
                m3.metric("Total", f"${quote.total:,.2f}")

                if quote.minimum_applied:
                    st.info("Minimum charge applied")

                with st.expander("🔍 Resolution Details"):
                    for t in quote.trace:
                        if t.value:
                            st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                        else:
                            st.caption(f"**{t.step}**: {t.description}")

                export_df = pd.DataFrame([quote.to_response_dict()])
                st.download_button(
                    "📥 CSV",
                    data=export_df.to_csv(index=False),
                    file_name=f"quote_{quote.service_id}.csv",
                    mime="text/csv",
                    use_container_width=True
                )

with tab2:
    st.dataframe(pd.DataFrame(engine.catalog.to_records()), use_container_width=True, hide_index=True)
