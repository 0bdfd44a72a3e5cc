# app/ui/chat.py

import streamlit as st
from services.api import send_chat_message


def chat_page():
    st.markdown("# 💬 Ask Finance Copilot")
    token = st.session_state["access_token"]

    if "chat_messages" not in st.session_state:
        st.session_state["chat_messages"] = []

    for msg in st.session_state.chat_messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["message"])

    user_input = st.chat_input("Ask about budgeting, saving, debt or investing")
    if user_input:
        with st.chat_message("user"):
            st.markdown(user_input)

        with st.chat_message("assistant"):
            with st.spinner("Thinking..."):
                response = send_chat_message(token, user_input)
                if response.get("error"):
                    st.error(response["error"])
                    return
                answer = response.get("message", "")
                st.markdown(answer)

        st.session_state["chat_messages"].append({"role": "user", "message": user_input})
        st.session_state["chat_messages"].append({"role": "assistant", "message": answer})
        st.rerun()
