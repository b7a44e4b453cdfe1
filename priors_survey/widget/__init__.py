"""Gradio widget for taking the survey in a browser.

NOTE: THIS IS A SIMPLE MINIMAL GUI WIDGET FOR COLLECTING DATA FOR RESEARCH PURPOSES.
Landing page -> one slider question per trial -> debrief, then a redirect to
the survey's terminal page.
"""
