"""
Views Package - The 'V' in MVC

Everything involved in turning dynamic lists into HTML:
- context.py: per-request RenderContext and per-template ViewScope
- templates.py: the TemplateRenderer boundary and its Jinja2 implementation
- helpers.py: DynamicListHelper, exposed to every template as ``dvml``
- templates/: default EditorTemplates and DisplayTemplates
- static/dvml.js: the client script adding and removing items

Applications override any default template by placing a template with the
same name (e.g. EditorTemplates/DynamicItemContainer.html) in their own
templates directory.
"""
