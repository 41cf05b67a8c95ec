import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from decimal import Decimal

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from forecaster import config
from forecaster.amortization import payment_schedule
from forecaster.domain import ForecastInput, Frequency
from forecaster.functional import safe_item, validate_item
from forecaster.money import format_money, round_money
from forecaster.recurrence import already_occurred, next_occurrence
from forecaster.services import ForecastService
from forecaster.transforms import (
    add_item,
    dump_seed,
    filter_by_frequencies,
    item_choices,
    load_seed,
    remove_item,
    update_item,
)

config.configure_logging()
logger = logging.getLogger("forecaster.app")

st.set_page_config(page_title="Cash-Flow Forecaster", layout="wide")

COLLECTIONS = {
    "income": ("incomes", "💵 Incomes"),
    "bill": ("bills", "🧾 Bills"),
    "debt": ("debts", "💳 Debts"),
}
FREQUENCIES = [f.value for f in Frequency]

if "fc_incomes" not in st.session_state:
    try:
        balance, incomes, bills, debts = load_seed(str(config.SEED_PATH))
    except FileNotFoundError:
        logger.warning("Seed file %s not found, starting empty", config.SEED_PATH)
        balance, incomes, bills, debts = Decimal("0"), (), (), ()
    st.session_state.fc_balance = float(balance)
    st.session_state.fc_incomes = incomes
    st.session_state.fc_bills = bills
    st.session_state.fc_debts = debts

reference_date = config.get_reference_date()
horizon_days = config.get_horizon_days()

st.sidebar.markdown("### 💰 Balance")
st.session_state.fc_balance = st.sidebar.number_input(
    "Current balance",
    value=float(st.session_state.fc_balance),
    step=100.0,
    format="%.2f",
)
st.sidebar.caption(f"Reference date: {reference_date.isoformat()} · horizon {horizon_days} days")


def snapshot() -> ForecastInput:
    return ForecastInput(
        incomes=st.session_state.fc_incomes,
        bills=st.session_state.fc_bills,
        debts=st.session_state.fc_debts,
        starting_balance=round_money(Decimal(str(st.session_state.fc_balance))),
        reference_date=reference_date,
        horizon_days=horizon_days,
    )


def timeline_to_df(entries):
    return pd.DataFrame(
        [
            {
                "date": e.date,
                "description": e.description,
                "kind": e.kind.value,
                "amount": float(e.amount),
                "balance": float(e.display_balance),
            }
            for e in entries
        ],
        columns=["date", "description", "kind", "amount", "balance"],
    )


def weeks_to_df(weeks):
    return pd.DataFrame(
        [
            {
                "week": w.week_label,
                "income": float(w.total_income),
                "expenses": float(w.total_expense),
                "net": float(w.net),
            }
            for w in weeks
        ],
        columns=["week", "income", "expenses", "net"],
    )


def item_rows(kind, items):
    rows = []
    for item in items:
        row = {"id": item.id, "name": item.name, "frequency": item.frequency.value}
        if kind == "debt":
            row["payment"] = float(item.payment_amount)
            row["total owed"] = float(item.total_owed)
        else:
            row["amount"] = float(item.amount)
        row["start"] = item.start_date.isoformat()
        row["next date"] = (
            "occurred" if already_occurred(item, reference_date)
            else next_occurrence(item, reference_date).isoformat()
        )
        rows.append(row)
    return pd.DataFrame(rows)


def item_form(kind, key, defaults=None):
    """Render an add/edit form and return the raw record on submit."""
    defaults = defaults or {}
    with st.form(key, clear_on_submit=defaults == {}):
        name = st.text_input("Name", value=defaults.get("name", ""))
        if kind == "debt":
            total_owed = st.number_input("Total owed", min_value=0.0, step=100.0, value=float(defaults.get("total_owed", 0)))
            amount = st.number_input("Payment amount", min_value=0.0, step=10.0, value=float(defaults.get("payment_amount", 0)))
        else:
            amount = st.number_input("Amount", min_value=0.0, step=10.0, value=float(defaults.get("amount", 0)))
        default_freq = defaults.get("frequency", "bi-weekly" if kind == "income" else "monthly")
        frequency = st.selectbox("Frequency", FREQUENCIES, index=FREQUENCIES.index(default_freq))
        start_date = st.date_input("Start date", value=defaults.get("start_date", reference_date))
        submitted = st.form_submit_button("Save")

    if not submitted:
        return None
    record = {"id": defaults.get("id"), "name": name, "frequency": frequency, "start_date": start_date}
    if kind == "debt":
        record.update(total_owed=str(total_owed), payment_amount=str(amount))
    else:
        record["amount"] = str(amount)
    return record


def manage_collection(kind):
    key, title = COLLECTIONS[kind]
    state_key = f"fc_{key}"
    items = st.session_state[state_key]
    st.title(title)

    if items:
        shown = st.multiselect("Frequency", FREQUENCIES, default=FREQUENCIES, key=f"freq_{kind}")
        visible = filter_by_frequencies(items, shown)
        if visible:
            st.dataframe(item_rows(kind, visible), use_container_width=True, hide_index=True)
        else:
            st.caption("No items with the selected frequencies.")
    else:
        st.info(f"No {key} yet.")

    st.subheader("➕ Add")
    record = item_form(kind, f"add_{kind}")
    if record is not None:
        result = validate_item(record, kind)
        if result.is_right():
            st.session_state[state_key] = add_item(items, result.get_or_else(None))
            st.success("Saved")
            st.rerun()
        else:
            st.error(result.get_error()["message"])

    if not items:
        return

    st.subheader("✏️ Edit / 🗑 Delete")
    choices = item_choices(items)
    selected_id = st.selectbox("Item", list(choices), format_func=choices.get, key=f"sel_{kind}")
    selected = safe_item(items, selected_id)
    if not selected.is_some():
        return
    current = selected.get_or_else(None)

    edited = item_form(kind, f"edit_{kind}_{current.id}", defaults=current.__dict__)
    if edited is not None:
        result = validate_item(edited, kind)
        if result.is_right():
            st.session_state[state_key] = update_item(items, result.get_or_else(None))
            st.rerun()
        else:
            st.error(result.get_error()["message"])

    confirm = st.checkbox("Yes, delete this item", key=f"confirm_{kind}_{current.id}")
    if st.button("Delete", key=f"del_{kind}_{current.id}", disabled=not confirm):
        st.session_state[state_key] = remove_item(items, current.id)
        logger.info("Deleted %s %s", kind, current.id)
        st.rerun()


report = ForecastService().report(snapshot())

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "💵 Incomes", "🧾 Bills", "💳 Debts", "📅 Timeline"]
)

if menu == "🏠 Overview":
    summary = report["summary"]
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric(f"Income ({horizon_days}d)", format_money(summary["total_income"]))
    with k2:
        st.metric(f"Expenses ({horizon_days}d)", format_money(summary["total_expense"]))
    with k3:
        st.metric("Ending balance", format_money(summary["ending_balance"]))
    with k4:
        low = summary["lowest_balance"]
        st.metric("Lowest balance", format_money(low) if low is not None else "-")

    weeks_df = weeks_to_df(report["weeks"])
    if not weeks_df.empty:
        fig_weeks = px.bar(
            weeks_df,
            x="week",
            y=["income", "expenses"],
            barmode="group",
            labels={"value": "Amount", "week": "Week", "variable": ""},
            title="Weekly income vs expenses",
            template="plotly_dark",
        )
        fig_weeks.add_scatter(x=weeks_df["week"], y=weeks_df["net"], mode="lines+markers", name="net")
        st.plotly_chart(fig_weeks, use_container_width=True)
    else:
        st.info("Nothing scheduled in the forecast window.")

    st.subheader("💳 Remaining owed")
    if report["debts"]:
        debts_df = pd.DataFrame(
            [
                {
                    "debt": d["name"],
                    "remaining": format_money(d["remaining"]),
                    "next payment": d["next_date"].isoformat() if d["next_date"] else "-",
                    "payoff": d["payoff_date"].isoformat() if d["payoff_date"] else "-",
                }
                for d in report["debts"]
            ]
        )
        st.table(debts_df)

    for entry in report["validation"]:
        for msg in entry["messages"]:
            st.caption(f"ℹ️ {msg}")

    st.download_button(
        "⬇ Export items (JSON)",
        dump_seed((
            Decimal(str(st.session_state.fc_balance)),
            st.session_state.fc_incomes,
            st.session_state.fc_bills,
            st.session_state.fc_debts,
        )),
        file_name="forecast_items.json",
    )

elif menu == "💵 Incomes":
    manage_collection("income")

elif menu == "🧾 Bills":
    manage_collection("bill")

elif menu == "💳 Debts":
    manage_collection("debt")
    debts = st.session_state.fc_debts
    if debts:
        st.subheader("📉 Amortization")
        choices = item_choices(debts)
        debt_id = st.selectbox("Debt", list(choices), format_func=choices.get, key="amort_debt")
        debt = next(d for d in debts if d.id == debt_id)
        schedule = payment_schedule(debt, report["horizon_date"])
        if schedule:
            sched_df = pd.DataFrame(
                [{"date": p.date, "paid": float(p.amount), "remaining": float(p.remaining)} for p in schedule]
            )
            fig_amort = go.Figure()
            fig_amort.add_trace(go.Scatter(x=sched_df["date"], y=sched_df["remaining"], mode="lines+markers", name="Remaining"))
            fig_amort.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
            st.plotly_chart(fig_amort, use_container_width=True)
        else:
            st.info("No payments before the end of the forecast window.")

elif menu == "📅 Timeline":
    st.title("📅 Timeline")
    df = timeline_to_df(report["timeline"])
    if df.empty:
        st.info("No events in the forecast window.")
    else:
        fig_bal = go.Figure()
        fig_bal.add_trace(go.Scatter(x=df["date"], y=df["balance"], mode="lines+markers", name="Balance", line_shape="hv"))
        fig_bal.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_bal, use_container_width=True)

        disp = df.assign(
            date=df["date"].map(lambda d: d.strftime("%m/%d")),
            amount=df.apply(lambda r: f"{'+' if r['kind'] == 'income' else '-'}{r['amount']:,.2f}", axis=1),
            balance=df["balance"].map(lambda x: f"{x:,.2f}"),
        )
        st.dataframe(disp, use_container_width=True, hide_index=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="timeline.csv")
