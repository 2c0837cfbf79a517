"""Static structure analyzer for JavaScript/TypeScript source trees.

Modules:
- fs_scan.py: Filesystem scanning and file classification.
- ast_parse.py: tree-sitter parsing of JavaScript and TypeScript modules.
- extract.py: Import and class declaration extraction from syntax trees.
- aggregate.py: Folding per-file results into one AnalysisReport.
- model.py: Report and request/response data structures.
- errors.py: Error taxonomy shared by the core and its collaborators.
- fetch.py: Resolving a repository location to a local directory.
- strategy.py: Merge strategy generation from two reports.
- config.py: Environment-driven settings.
"""

__all__ = [
	"fs_scan",
	"ast_parse",
	"extract",
	"aggregate",
	"model",
	"errors",
	"fetch",
	"strategy",
	"config",
]
