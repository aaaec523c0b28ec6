from .resolver import AttackResult, CombatResolver, GroupClassification, RecoveryResult
