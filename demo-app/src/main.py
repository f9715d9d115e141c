"""Main entry point for demo app."""
from pathlib import Path

import uvicorn

from pyportal.runtime.app import PortalApp


def main():
    """Run the demo app."""
    root = Path(__file__).parent
    app = PortalApp(
        templates_dir=str(root / 'templates'),
        layout='_layout.html',
        static_dir=str(root / 'static'),
        debug=True,
    )
    uvicorn.run(app, host='127.0.0.1', port=3000)


if __name__ == '__main__':
    main()
