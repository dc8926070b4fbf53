import logging

import altair as alt
import pandas as pd
import streamlit as st

from analytics.exit_comparison import HORIZON_YEARS, compare_exit
from analytics.frames import (
    cost_breakdown,
    exit_comparison_dataframe,
    long_format,
    projection_dataframe,
    wealth_race_dataframe,
)
from analytics.projection import project_scenario, rent_scenario, required_rent_for_roi
from analytics.wealth import GROWTH_RATE, SAFE_RATE, wealth_race
from assistant.gateway import AIGateway
from assistant.sequencing import RequestSequencer
from assistant.services import (
    StrategyChat,
    analyze_external_link,
    analyze_financial_deep_dive,
    analyze_location,
    display_domain,
    generate_portfolio_strategy,
    search_market,
)
from config import DEFAULT_VALUES, LOG_LEVEL, RISK_PROFILES
from finance.affordability import max_affordable_price
from finance.amortization import amortization_schedule, calculate_financials, remaining_balance
from models import InvalidParametersError, InvestmentParameters, ScenarioKnobs

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Property Investment Calculator", page_icon="🏠", layout="wide")

CUR = "€"


def _state():
    ss = st.session_state
    if "sequencer" not in ss:
        ss.sequencer = RequestSequencer()
        ss.gateway = AIGateway.from_env()
        ss.chat = StrategyChat()
        ss.ai_results = {}
    return ss


def run_ai(channel: str, call, *args, **kwargs):
    """Issue a sequence number, run the call, store the answer only if still current."""
    ss = _state()
    token = ss.sequencer.issue(channel)
    answer = call(ss.gateway, *args, **kwargs)
    if ss.sequencer.is_current(channel, token):
        ss.ai_results[channel] = answer
    else:
        logger.info("Dropping stale AI response on %s (token %d, latest %d)",
                    channel, token, ss.sequencer.latest(channel))


def _apply_rent(value: float):
    st.session_state.monthly_rent = value


def fmt_years(value) -> str:
    return "n/a" if value is None else f"{value:.1f} yrs"


# ------------------------- Calculator tab -------------------------

def calculator_tab():
    defaults = DEFAULT_VALUES["calculator"]
    scen = DEFAULT_VALUES["scenario"]
    ss = _state()

    left, right = st.columns([1, 3], gap="large")

    with left:
        st.markdown("### Property")
        location = st.text_input("Location", value=defaults["location"])
        price = st.number_input("Purchase price", min_value=0.0, value=defaults["purchase_price"], step=5000.0, format="%.0f")
        renovation = st.number_input("Renovation", min_value=0.0, value=defaults["renovation_cost"], step=1000.0, format="%.0f")
        closing_pct = st.slider("Closing costs (% of price)", 0.0, 15.0, defaults["closing_costs_percent"], 0.1,
                                help="Transfer tax, land registry, broker and notary")

        st.markdown("### Financing")
        mode = st.radio("Down payment", ["percent", "absolute"], horizontal=True,
                        format_func=lambda m: "% of price" if m == "percent" else f"Amount ({CUR})")
        if mode == "percent":
            dp_value = st.slider("Down payment (%)", 0.0, 100.0, defaults["down_payment_value"], 1.0)
        else:
            dp_value = st.number_input("Down payment", min_value=0.0, value=price * defaults["down_payment_value"] / 100.0, step=1000.0, format="%.0f")
        rate = st.slider("Interest rate (annual %)", 0.0, 10.0, defaults["interest_rate"], 0.05)
        term = st.slider("Loan term (years)", 1, 40, defaults["loan_term_years"], 1)

        st.markdown("### Rent & costs")
        if "monthly_rent" not in ss:
            ss.monthly_rent = defaults["monthly_rent"]
        rent = st.number_input("Monthly rent", min_value=0.0, step=10.0, format="%.2f", key="monthly_rent")
        maintenance = st.number_input("Monthly maintenance (non-recoverable)", min_value=0.0, value=defaults["monthly_maintenance"], step=10.0, format="%.0f")

    try:
        params = InvestmentParameters(
            purchase_price=price, renovation_cost=renovation, closing_costs_percent=closing_pct,
            interest_rate=rate, loan_term_years=int(term), down_payment_mode=mode,
            down_payment_value=dp_value, monthly_rent=rent, monthly_maintenance=maintenance,
            location=location,
        )
    except InvalidParametersError as e:
        right.error(f"Invalid input: {e}")
        return

    res = calculate_financials(params)

    with right:
        st.markdown("### Result")
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Equity required", f"{CUR}{res.total_investment:,.0f}", border=True,
                  help="Down payment + closing costs + renovation")
        m2.metric("Loan", f"{CUR}{res.loan_amount:,.0f}", border=True)
        m3.metric("Monthly payment", f"{CUR}{res.monthly_payment:,.2f}", border=True)
        m4.metric("Monthly cashflow", f"{CUR}{res.monthly_cashflow:,.2f}", border=True)
        m5, m6, m7, m8 = st.columns(4)
        m5.metric("Cash-on-cash ROI", f"{res.roi:.2f}%", border=True)
        m6.metric("Break-even rent", f"{CUR}{res.break_even_rent:,.2f}", border=True,
                  help="Rent that exactly covers loan payment and maintenance")
        m7.metric("Total cost", f"{CUR}{res.total_cost:,.0f}", border=True)
        m8.metric("Payback", fmt_years(res.amortization_years), border=True,
                  help="Years until cashflow repays the equity (n/a while cashflow is not positive)")

        # ---- Target ROI -> required rent ----
        st.markdown("### Target return")
        t1, t2 = st.columns([3, 1])
        with t1:
            roi_default = min(20.0, max(-10.0, float(round(res.roi, 1))))
            target_roi = st.slider("Target cash-on-cash ROI (%)", -10.0, 20.0, roi_default, 0.1)
        with t2:
            needed = required_rent_for_roi(res, params, target_roi)
            st.metric("Required rent", f"{CUR}{needed:,.2f}")
            st.button("Apply rent", on_click=_apply_rent, args=(needed,))

        # ---- Scenario knobs ----
        st.markdown("### Scenario simulation")
        k1, k2, k3 = st.columns(3)
        sim_rent = k1.slider("Simulated rent", 0.0, max(rent * 2, 100.0), float(rent), 10.0)
        indexation = k2.slider("Rent indexation (annual %)", 0.0, 10.0, scen["indexation_rate"], 0.1)
        inflation = k3.slider("Cost inflation (annual %)", 0.0, 10.0, scen["inflation_rate"], 0.1)
        knobs = ScenarioKnobs(simulated_rent=sim_rent, indexation_rate=indexation, inflation_rate=inflation,
                              property_appreciation=scen["property_appreciation"],
                              alternative_return=scen["alternative_return"],
                              selling_tax_percent=scen["selling_tax_percent"])

        sim = rent_scenario(res, params, sim_rent)
        s1, s2, s3 = st.columns(3)
        s1.metric("Simulated cashflow", f"{CUR}{sim.monthly_cashflow:,.2f}", delta=f"{sim.cashflow_change:+,.2f}", border=True)
        s2.metric("Simulated ROI", f"{sim.roi:.2f}%", border=True)

        projection = project_scenario(params, res, knobs)
        dyn = projection.dynamic_break_even
        s3.metric("Break-even (dynamic)",
                  fmt_years(dyn) if dyn is not None else f"> {projection.horizon_years} yrs",
                  help=f"Static (no indexation): {fmt_years(projection.static_break_even)}", border=True)

        pdf = projection_dataframe(projection)
        bars = alt.Chart(pdf).mark_bar(color="#3b82f6").encode(
            x=alt.X("Year:O", title="Year", axis=alt.Axis(labelAngle=0)),
            y=alt.Y("Cashflow:Q", title="Annual cashflow", axis=alt.Axis(format=",.0f")),
            tooltip=[alt.Tooltip("Year:O"), alt.Tooltip("Cashflow:Q", format=",.0f"),
                     alt.Tooltip("Cumulative:Q", format=",.0f")],
        )
        line = alt.Chart(pdf).mark_line(color="#10b981").encode(x="Year:O", y=alt.Y("Cumulative:Q", title="Cumulative"))
        loan_end = alt.Chart(pd.DataFrame({"Year": [params.loan_term_years]})).mark_rule(
            color="#ef4444", strokeDash=[3, 3]).encode(x="Year:O")
        st.altair_chart((bars + line + loan_end).properties(height=350), use_container_width=True)
        st.caption("Red rule marks the end of the loan term; cumulative cashflow starts at minus the equity invested.")

        # ---- Keep vs sell ----
        with st.expander("Keep & rent vs. sell & invest", expanded=False):
            e1, e2, e3 = st.columns(3)
            appreciation = e1.slider("Property appreciation (annual %)", -5.0, 10.0, scen["property_appreciation"], 0.1)
            alt_return = e2.slider("Alternative return (annual %)", 0.0, 15.0, scen["alternative_return"], 0.1)
            sale_tax = e3.slider("Tax on sale gain (%)", 0.0, 50.0, scen["selling_tax_percent"], 1.0)
            exit_knobs = ScenarioKnobs(simulated_rent=sim_rent, indexation_rate=indexation, inflation_rate=inflation,
                                       property_appreciation=appreciation, alternative_return=alt_return,
                                       selling_tax_percent=sale_tax)
            edf = exit_comparison_dataframe(compare_exit(params, res, exit_knobs))
            melted = long_format(edf, "Years", ["Keep_And_Rent", "Sell_And_Invest"], value_name="Wealth")
            wealth_chart = alt.Chart(melted).mark_line(point=True).encode(
                x=alt.X("Years:O", axis=alt.Axis(labelAngle=0)),
                y=alt.Y("Wealth:Q", axis=alt.Axis(format=",.0f")),
                color=alt.Color("Scenario:N", scale=alt.Scale(range=["#3b82f6", "#f59e0b"])),
                tooltip=["Years:O", "Scenario:N", alt.Tooltip("Wealth:Q", format=",.0f")],
            ).properties(height=350)
            st.altair_chart(wealth_chart, use_container_width=True)
            st.caption("Sell & invest compounds the equity invested at the alternative return. "
                       "Sale costs and tax are not deducted from that path; the table shows net proceeds per year separately.")
            st.dataframe(edf.set_index("Years"), use_container_width=True)
            left_on_loan = remaining_balance(res.loan_amount, params.interest_rate, params.loan_term_years,
                                             HORIZON_YEARS * 12)
            st.metric(f"Loan balance after {HORIZON_YEARS} years", f"{CUR}{left_on_loan:,.0f}", border=True)

        chart_left, chart_right = st.columns([1, 1], gap="medium")
        with chart_left:
            st.markdown("### Cost mix")
            colors = ["#3b82f6", "#10b981", "#f59e0b"]
            pie = alt.Chart(cost_breakdown(params)).mark_arc(innerRadius=50, outerRadius=110).encode(
                theta=alt.Theta("Amount:Q"),
                color=alt.Color("Category:N", scale=alt.Scale(range=colors), legend=alt.Legend(orient="left")),
                tooltip=["Category:N", alt.Tooltip("Amount:Q", format=",.0f")],
            )
            st.altair_chart(pie, use_container_width=False)
        with chart_right:
            st.markdown("### Loan schedule")
            st.dataframe(amortization_schedule(res.loan_amount, params.interest_rate, params.loan_term_years)
                         .set_index("Year").round(0), height=280, use_container_width=True)

        # ---- AI ----
        st.markdown("### AI analysis")
        a1, a2 = st.columns(2)
        with a1:
            if st.button("Check location", disabled=not location):
                with st.spinner("Analysing location..."):
                    run_ai("location", analyze_location, location, price, 0.0, renovation)
            loc = ss.ai_results.get("location")
            if loc is not None:
                st.markdown(loc.text)
                for src in loc.sources:
                    st.markdown(f"- [{src.title or display_domain(src.url)}]({src.url})")
        with a2:
            if st.button("Financial deep dive"):
                with st.spinner("Writing report..."):
                    run_ai("deep_dive", analyze_financial_deep_dive, params, res)
            report = ss.ai_results.get("deep_dive")
            if report:
                st.markdown(report)


# ------------------------- Portfolio tab -------------------------

def portfolio_tab():
    defaults = DEFAULT_VALUES["portfolio"]
    ss = _state()

    st.markdown("### Portfolio strategy")
    c1, c2, c3 = st.columns(3)
    goal = c1.number_input("Target net cashflow / month", min_value=0.0, value=defaults["goal_cashflow"], step=100.0, format="%.0f")
    years = c2.slider("Time frame (years)", 1, 40, defaults["years"], 1)
    capital = c3.number_input("Starting capital", min_value=0.0, value=defaults["current_capital"], step=5000.0, format="%.0f")
    c4, c5 = st.columns(2)
    count = c4.slider("Target number of properties", 1, 20, defaults["target_property_count"], 1)
    risk = c5.selectbox("Risk profile", RISK_PROFILES, index=RISK_PROFILES.index(defaults["risk_profile"]))

    if st.button("Generate strategy", type="primary"):
        with st.spinner("Building strategy..."):
            run_ai("strategy", generate_portfolio_strategy, goal, years, capital, risk, count)
        strategy = ss.ai_results.get("strategy")
        if not ss.chat.start(strategy) and strategy is not None:
            st.warning(strategy.text)

    if ss.chat.strategy:
        st.markdown(ss.chat.strategy)
        st.markdown("---")
        st.markdown("#### Ask about this strategy")
        for msg in ss.chat.history:
            with st.chat_message("user" if msg.role == "user" else "assistant"):
                st.markdown(msg.text)
        question = st.chat_input("e.g. When should I sell the first unit?")
        if question:
            with st.spinner("Thinking..."):
                ss.chat.ask(ss.gateway, question)
            st.rerun()


# ------------------------- Market tab -------------------------

def market_tab():
    ss = _state()
    left, right = st.columns(2, gap="large")

    with left:
        st.markdown("### Analyse a listing")
        with st.form("link_form"):
            url = st.text_input("Listing URL")
            submitted = st.form_submit_button("Analyse")
        if submitted and url:
            with st.spinner("Reading listing..."):
                run_ai("link", analyze_external_link, url)
            if ss.ai_results.get("link") is None:
                st.warning("The listing could not be analysed.")
        listing = ss.ai_results.get("link")
        if listing is not None:
            l1, l2, l3 = st.columns(3)
            l1.metric("Price", f"{CUR}{listing.purchase_price:,.0f}" if listing.purchase_price else "n/a")
            l2.metric("Size", f"{listing.size_sqm:,.0f} m²" if listing.size_sqm else "n/a")
            l3.metric("Est. rent", f"{CUR}{listing.estimated_rent:,.0f}" if listing.estimated_rent else "n/a")
            st.caption(listing.location)
            st.markdown(listing.assessment)

    with right:
        st.markdown("### Market search")
        with st.form("search_form"):
            query = st.text_input("What are you looking for?", placeholder="2-room flat Vienna under 250k")
            searched = st.form_submit_button("Search")
        if searched and query:
            with st.spinner("Searching..."):
                run_ai("search", search_market, query)
        found = ss.ai_results.get("search")
        if found is not None:
            st.markdown(found.text)
            for src in found.sources:
                st.markdown(f"- [{src.title or display_domain(src.url)}]({src.url}) · {display_domain(src.url)}")


# ------------------------- Savings tab -------------------------

def savings_tab():
    aff = DEFAULT_VALUES["affordability"]
    wd = DEFAULT_VALUES["wealth"]
    mode = st.radio("Planner", ["Affordability", "Wealth builder"], horizontal=True)

    if mode == "Affordability":
        left, right = st.columns(2, gap="large")
        with left:
            income = st.number_input("Net household income / month", min_value=0.0, value=aff["net_income"], step=100.0)
            living = st.number_input("Living expenses / month", min_value=0.0, value=aff["living_expenses"], step=50.0)
            loans = st.number_input("Existing loan payments / month", min_value=0.0, value=aff["existing_loans"], step=50.0)
            rate = st.slider("Interest rate (annual %)", 0.0, 10.0, aff["interest_rate"], 0.05, key="aff_rate")
            term = st.slider("Loan term (years)", 1, 40, aff["term_years"], 1, key="aff_term")
            equity = st.number_input("Equity", min_value=0.0, value=aff["equity"], step=1000.0)
        with right:
            result = max_affordable_price(income, living, loans, rate, int(term), equity)
            st.metric("Max monthly payment", f"{CUR}{result.max_monthly_payment:,.0f}", border=True,
                      help="Lower of household surplus and 40% of net income")
            st.metric("Max loan", f"{CUR}{result.max_loan:,.0f}", border=True)
            st.metric("Max purchase price", f"{CUR}{result.max_price:,.0f}", border=True,
                      help="(Loan + equity) / 1.10, assuming ~10% closing costs")
    else:
        c1, c2, c3 = st.columns(3)
        target = c1.number_input("Savings target", min_value=0.0, value=wd["target"], step=1000.0)
        monthly = c2.number_input("Monthly savings", min_value=0.0, value=wd["monthly_contribution"], step=50.0)
        initial = c3.number_input("Initial capital", min_value=0.0, value=wd["initial_capital"], step=1000.0)

        race = wealth_race(target, initial, monthly)
        w1, w2 = st.columns(2)
        w1.metric(f"Savings account ({SAFE_RATE:g}%)",
                  "not reached" if race.years_to_target_safe is None else f"{race.years_to_target_safe} yrs", border=True)
        w2.metric(f"Index fund ({GROWTH_RATE:g}%)",
                  "not reached" if race.years_to_target_growth is None else f"{race.years_to_target_growth} yrs", border=True)

        wdf = wealth_race_dataframe(race)
        melted = long_format(wdf, "Year", ["Savings_Account", "Index_Fund", "Target"], value_name="Balance")
        chart = alt.Chart(melted).mark_line().encode(
            x=alt.X("Year:O", axis=alt.Axis(labelAngle=0)),
            y=alt.Y("Balance:Q", axis=alt.Axis(format=",.0f")),
            color=alt.Color("Scenario:N", scale=alt.Scale(range=["#94a3b8", "#10b981", "#ef4444"])),
            tooltip=["Year:O", "Scenario:N", alt.Tooltip("Balance:Q", format=",.0f")],
        ).properties(height=380)
        st.altair_chart(chart, use_container_width=True)


# ------------------------- UI LAYOUT -------------------------

st.title("🏠 Property Investment Calculator")

tab_calc, tab_portfolio, tab_market, tab_savings = st.tabs(
    ["Calculator", "Portfolio planner", "Market search", "Savings planner"]
)
with tab_calc:
    calculator_tab()
with tab_portfolio:
    portfolio_tab()
with tab_market:
    market_tab()
with tab_savings:
    savings_tab()

st.caption("This tool is a decision aid, not financial advice. Market data from the AI assistant may be incomplete or outdated.")
