"""Infrastructure layer — graph loading and the NetworkX adjacency oracle."""
