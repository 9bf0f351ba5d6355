# ui/gantt_panel.py
import streamlit as st
import plotly.express as px

from models.project import Project
from utils.timeline import timeline_df_for_project


def render_gantt_panel(project: Project):
    st.subheader("Due Dates")
    df = timeline_df_for_project(project)
    if df.empty:
        st.info("Add due dates to tasks/subtasks to see the timeline.")
    else:
        fig = px.timeline(df, x_start="Start", x_end="Finish", y="Item",
                          color="Status", hover_data=["Type", "Bucket"])
        fig.update_yaxes(autorange="reversed")
        st.plotly_chart(fig, use_container_width=True)
