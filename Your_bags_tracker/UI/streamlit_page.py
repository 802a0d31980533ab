import pandas as pd
import streamlit as st

from Your_bags_tracker.bags_tracker import BagsTracker, setup_logging
from Your_bags_tracker.configuration_manager import ConfigurationError
from Your_bags_tracker.tracker_engine import AddFlowState
from Your_bags_tracker.UI.web_layout.utils import (
    color_negative_values,
    format_change,
    format_price,
    money_color,
)
from Your_bags_tracker.valuation_engine import format_usd

st.set_page_config(
    page_title="your bags",
    page_icon=":moneybag:",
    layout="wide",
)


@st.cache_resource
def init_logging():
    setup_logging(level="WARNING")


# one tracker per browser session, so add flow and notices stay private
if "tracker" not in st.session_state:
    init_logging()
    try:
        tracker = BagsTracker()
    except ConfigurationError as error:
        st.error(f"Configuration error: {error}")
        st.stop()
    tracker.refresh()
    st.session_state.tracker = tracker

tracker = st.session_state.tracker
engine = tracker.engine


def refresh_prices():
    tracker.refresh()


def add_coin(coin):
    if engine.add(coin):
        st.session_state.coin_query = ""


"# your bags"

total = engine.valuation().total
st.markdown(
    f"<h3 style='color: {money_color(total)};'>Total: {format_usd(total)}</h3>",
    unsafe_allow_html=True,
)

search_col, refresh_col = st.columns([5, 1])
with search_col:
    query = st.text_input(
        "Coin",
        placeholder="Enter coin name or symbol",
        label_visibility="collapsed",
        key="coin_query",
    )
with refresh_col:
    st.button(
        "Refresh", key="refresh", on_click=refresh_prices, use_container_width=True
    )

# the add callback clears the query; keep the suggestions hidden until a new one is typed
if engine.add_flow_state == AddFlowState.ADDED and not query.strip():
    suggestions = []
else:
    suggestions = engine.enter_query(query)
for coin in suggestions:
    st.button(
        f"{coin.name} ({coin.symbol.upper()})",
        key=f"add_{coin.id}",
        on_click=add_coin,
        args=(coin,),
    )

for notice in engine.notification_manager.drain():
    {"error": st.error, "warning": st.warning, "success": st.success}.get(
        notice.level, st.info
    )(notice.message)

st.markdown("<hr/>", unsafe_allow_html=True)

rows = engine.holdings_view()
for index, row in enumerate(rows):
    logo_col, name_col, qty_col, price_col, move_col, remove_col = st.columns(
        [1, 4, 2, 3, 1, 1]
    )
    with logo_col:
        if row["image"]:
            st.image(row["image"], width=32)
    with name_col:
        st.markdown(f"**{row['name']}** {row['symbol'].upper()}")
    with qty_col:
        new_quantity = st.number_input(
            "Quantity",
            min_value=0.0,
            value=float(row["quantity"]),
            key=f"qty_{row['id']}",
            label_visibility="collapsed",
        )
        if new_quantity != row["quantity"]:
            engine.set_quantity(row["id"], new_quantity)
            st.rerun()
    with price_col:
        st.markdown(
            f"{format_price(row['price'])} "
            f"<span style='color: {money_color(row['change_24h'])};'>{format_change(row['change_24h'])}</span><br/>"
            f"<span style='color: green;'>{format_usd(row['value'])}</span>",
            unsafe_allow_html=True,
        )
    with move_col:
        if st.button("▲", key=f"up_{row['id']}", disabled=index == 0):
            engine.reorder(index, index - 1)
            st.rerun()
        if st.button("▼", key=f"down_{row['id']}", disabled=index == len(rows) - 1):
            engine.reorder(index, index + 1)
            st.rerun()
    with remove_col:
        if st.button("✕", key=f"remove_{row['id']}"):
            engine.remove(row["id"])
            st.rerun()

if rows:
    holdings_df = pd.DataFrame(rows)[["name", "symbol", "quantity", "price", "change_24h", "value"]]
    holdings_df.rename(
        columns={
            "name": "Coin",
            "symbol": "Symbol",
            "quantity": "Quantity",
            "price": "Price $",
            "change_24h": "24h %",
            "value": "Value $",
        },
        inplace=True,
    )
    st.dataframe(
        holdings_df.style.format(
            {"Price $": "{:,.2f}", "24h %": "{:+.2f}%", "Value $": "{:,.2f}"},
            na_rep="N/A",
        ).map(color_negative_values, subset=["24h %"]),
        use_container_width=True,
        hide_index=True,
    )
