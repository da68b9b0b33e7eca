import logging

import z3

l = logging.getLogger(name=__name__)

# fixed-width bit-vectors and arrays, no quantifiers
DEFAULT_LOGIC = "QF_ABV"


class Session:
    """A z3 solver plus the terms declared for the initial state."""

    def __init__(self, logic=DEFAULT_LOGIC):
        self.logic = logic
        self.solver = z3.SolverFor(logic)
        self.declarations = {}

    def _unique_name(self, name):
        if name not in self.declarations:
            return name
        i = 1
        while f"{name}_{i}" in self.declarations:
            i += 1
        return f"{name}_{i}"

    def fresh_bitvec(self, name, width):
        name = self._unique_name(name)
        term = z3.BitVec(name, width)
        self.declarations[name] = term
        l.debug("declared %s as BitVec(%d)", name, width)
        return term

    def declare_array(self, name, index_width, value_width):
        name = self._unique_name(name)
        term = z3.Array(
            name, z3.BitVecSort(index_width), z3.BitVecSort(value_width)
        )
        self.declarations[name] = term
        l.debug("declared %s as Array(%d -> %d)", name, index_width, value_width)
        return term

    def add(self, *constraints):
        self.solver.add(*constraints)

    def check(self):
        return self.solver.check()

    def model(self):
        return self.solver.model()

    def evaluate(self, term):
        """Value of term in the current model as an int.

        Checks satisfiability first; unconstrained symbols evaluate to an
        arbitrary value picked by model completion.
        """
        result = self.check()
        if result != z3.sat:
            raise z3.Z3Exception(f"no model, solver returned {result}")
        return self.model().eval(term, model_completion=True).as_long()

    def to_smtlib(self):
        return self.solver.sexpr()
