# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .pipeline import GlobalModuleTransformer, lower_module
from .records import ExportRecord, ImportRecord, ModuleKind
from .resolver import ModuleResolver, ResolvedModule

__all__ = [
	"GlobalModuleTransformer",
	"lower_module",
	"ExportRecord",
	"ImportRecord",
	"ModuleKind",
	"ModuleResolver",
	"ResolvedModule",
]
