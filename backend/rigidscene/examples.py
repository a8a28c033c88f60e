"""Example scene programs, also served by `GET /scene/examples`."""

DOMINOES = """\
ramp: rectangle 360 100 600 10 [isStatic, angle=5, color=#5881D8];
platform-y: 300;
platform: rectangle 550 platform-y 400 10 [isStatic, color=#62B132];
domino: (x, y => rectangle x y 10 50);
(grid 9 1 (i, j => (domino (+ 350 (* i 50)) (- platform-y (* (+ j 1) 100)))));
ball: (=> circle 100 20 20 [friction=0, frictionAir=0, inertia=Infinity, color=#91DC47]);
(repeat 5 ball);
(grid 6 6 (i, j => polygon 400 400 (+ 3 i) 10 [friction=0, frictionAir=0]));
box: rectangle 100 200 30 30 [color=#8FB5FE, isStatic=true];
hex: (c => polygon 150 300 6 20 [color=c]);
a: (hex #8FB5FE);
b: (hex #B5EAD7);
c: (hex #C7CEEA);
d: (hex #FF9AA2);
e: (hex #FFB7B2);
f: (hex #FFDAC1);
g: (hex #E2F0CB);
a -- b [length=60];
a -- c [length=60];
a -- d [length=60];
a -- e [length=60];
a -- f [length=60];
a -- g [length=60];
a %% box [length=100];
"""

SPRING_BRIDGE = """\
left: rectangle 100 250 200 20 [isStatic, color=#8FB5FE];
right: rectangle 700 250 200 20 [isStatic, color=#8FB5FE];
left-bridge: rectangle 300 200 80 40 [color=#FFD166];
right-bridge: rectangle 500 200 80 40 [color=#FFD166];
left-bridge -- left [color=#073B4C];
right-bridge -- right [color=#073B4C];
left-bridge %% right-bridge [color=#06D6A0, length=50];
(repeat 7 (=> polygon 400 100 6 30 [color=#91DC47]));
"""

MIRRORS = """\
laser: (x, y => {rectangle 0 0 100 20 [isStatic, color=#e63946];
                 lens: rectangle 50 0 10 10 [isStatic, color=#22223b];}
                [x=x, y=y]);
l1: (laser 100 250 0);
splitter: (x, y, phi => rectangle x y 50 10 [isStatic, isSensor, angle=phi, color=#f4a261]);
s1: (splitter 250 250 45);
mirror: (x, y, phi => rectangle x y 50 5 [isStatic, angle=phi, color=#457b9d]);
m1: (mirror 400 250 -45);
m2: (mirror 250 100 -45);
s2: (splitter 400 100 45);
detector: (x, y, phi => rectangle x y 70 10 [isStatic, isSensor, angle=phi, color=#2a9d8f]);
d1: (detector 500 100 90);
lens -- s1 [color=green];
s1 -- m1 [color=cyan];
s1 -- m2 [color=blue];
m1 -- s2 [color=cyan];
m2 -- s2 [color=blue];
s2 -- d1 [color=green];
dust: (=> polygon 10 10 3 3 [restitution=1, friction=0, mass=0, frictionAir=0, inertia=Infinity, frictionStatic=0]);
(repeat 200 dust);
"""

NEWTONS_CRADLE = """\
ceiling: rectangle 400 100 500 20 [isStatic, color=#8FB5FE];
(grid 6 1 (i, j => circle (+ 200 (* i 50)) 150 25 [friction=0, frictionAir=0, inertia=Infinity, color=#91DC47] -- ceiling [length=200, pointB=[(- (* i 50) 150) 0]]));
"""

SEESAW = """\
fulcrum: rectangle 400 400 20 100 [isStatic, color=#8FB5FE, isSensor];
plank: rectangle 400 290 400 20 [color=#FFD166];
plank -o- fulcrum;
(repeat 7 (=> polygon 400 100 6 30 [color=#91DC47]));
"""

EXAMPLES: dict[str, str] = {
    "dominoes": DOMINOES,
    "spring-bridge": SPRING_BRIDGE,
    "mirrors": MIRRORS,
    "newtons-cradle": NEWTONS_CRADLE,
    "seesaw": SEESAW,
}

__all__ = ["EXAMPLES"]
