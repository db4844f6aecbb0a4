"""
Uniform-grid field simulations: wave equation, reaction-diffusion,
falling sand and heat diffusion, each rendered to a flat RGB buffer.
"""
