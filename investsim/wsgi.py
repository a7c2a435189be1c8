#setup: pip install -e .
#setup: flask --app investsim.wsgi run --port 5000 --debug

from investsim.app import create_app
from investsim.core.config import settings

app = create_app()


if __name__ == "__main__":
    app.run(port=5000, debug=settings.DEBUG)
