from config.settings import settings

APP_CONFIG = {
    "title": "PM2.5 AQI Category Models",
    "icon": "🌫️",
    "layout": "wide",
    "initial_sidebar_state": "collapsed",
}

DATA_CONFIG = {
    "csv": settings.DATA_CSV,
    "artifact_dir": settings.ARTIFACT_DIR,
    "figure_dir": settings.FIGURE_DIR
}
