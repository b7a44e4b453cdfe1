"""Constants for the widget package."""

LANDING_MD = """
## Welcome

In this survey you will see a series of mental states. For each one, move the
slider to show how likely you think it is that a person is experiencing it,
then press **Submit**.

- The Submit button unlocks once you move the slider.
- There are no right or wrong answers; go with your first impression.
"""

DEBRIEF_MD = """
## Thank you!

Your responses have been recorded. You will be redirected shortly.
"""

USER_FRIENDLY_EXC = (
    "Whoa...something went sideways."
    " Our researchers have been alerted and are investigating.\n"
    "This session can't continue, but we appreciate your understanding."
)

STUDY_FULL_MSG = (
    "Sorry, this study has no open participant slots right now."
    " Please check back later."
)

# Runs in the browser after each submit; navigates once a URL is present.
REDIRECT_JS = """
(url) => {
    if (url) {
        window.location.href = url;
    }
    return [];
}
"""
