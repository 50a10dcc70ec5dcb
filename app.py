"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

Set EXPTRACK_DATA_FILE to choose the data file (default ./expenses.db).
This module simply delegates to exptrack.ui.dashboard.main().
"""

from exptrack.ui import dashboard


def main():
    dashboard.main()


if __name__ == "__main__":
    main()
