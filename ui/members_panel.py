# ui/members_panel.py
import streamlit as st
import pandas as pd

from models.project import Project


def render_members_panel(project: Project):
    st.subheader("Project Members")
    data = [{"Name": u.name, "Phone": u.phone_number,
             "Open tasks": sum(1 for t in project.pending_tasks if t.is_assigned_to(u.id))}
            for u in project.members]
    st.dataframe(pd.DataFrame(data) if data else pd.DataFrame(columns=["Name", "Phone", "Open tasks"]))
