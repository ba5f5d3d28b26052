"""node-starter scaffolder -- generates project directories.

Quick usage::

    from node_starter.config import ProjectConfig
    from node_starter.scaffolder import ProjectGenerator

    config = ProjectConfig(name="my-app", archetype="frontend-bff", framework="solid")
    project_path = await ProjectGenerator(config).generate()
"""

from node_starter.scaffolder.generator import ProjectGenerator, scaffold_project
from node_starter.scaffolder.remote import scaffold_remote_template
from node_starter.scaffolder.templates import TemplateRenderer, TemplateStore, get_available_templates

__all__ = [
    "ProjectGenerator",
    "TemplateRenderer",
    "TemplateStore",
    "get_available_templates",
    "scaffold_project",
    "scaffold_remote_template",
]
