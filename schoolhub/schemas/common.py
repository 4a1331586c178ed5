from typing import Annotated

from pydantic import StringConstraints

# Required text field: surrounding whitespace stripped, must not end up empty
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
