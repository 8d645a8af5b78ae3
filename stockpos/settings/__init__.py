import os

# PIPELINE selects the settings module: LOCAL (default) or PRODUCTION
pipeline = os.getenv('PIPELINE', 'LOCAL').upper()

if pipeline == 'PRODUCTION':
    from .production import *
else:
    from .local import *
