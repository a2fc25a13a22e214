"""specdoc -- Turn OpenAPI descriptions into renderable documentation.

The package converts a full OpenAPI document, or a single bare operation
object, into a renderer-agnostic document model: a page descriptor plus an
ordered tree of typed blocks (the *page container*).  Template sets then
turn the container into Markdown, HTML, or anything else.

Typical workflow::

    specdoc build petstore.yaml -o petstore.page.json
    specdoc render html -i petstore.page.json -o petstore.html

or in one step::

    specdoc docs petstore.yaml -t html -o petstore.html

Modules:
    app: Typer application and CLI entry point.
    builder: The transform from API description to page container.
    parser: Document loading and ``$ref`` resolution.
    render: Jinja2 template rendering of page containers.
    models: Pydantic models for the page container and configuration.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr discipline and logging setup.
"""

__version__ = "0.1.0"
