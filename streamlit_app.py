"""
Entry point for `streamlit run streamlit_app.py`.
"""

from student_face_ui.app import main

if __name__ == "__main__":
    main()
